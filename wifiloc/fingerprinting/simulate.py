"""Synthetic WiFi radio map generation.

Builds an in-memory radio map on a regular grid using a log-distance
path-loss model with shadow fading. APs whose RSS falls below the detection
threshold are not heard, so neighboring fingerprints see different AP sets,
as real scans do.

Model: P(d) = P0 - 10*n*log10(d/d0) + X_sigma

Author: Navigation Engineer
Date: 2024
"""

from typing import List, Optional, Tuple

import numpy as np

from .types import Fingerprint


def log_distance_path_loss(
    d: float,
    P0: float = -30.0,
    d0: float = 1.0,
    n: float = 2.5,
    sigma: float = 4.0,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """
    Compute RSS using log-distance path-loss model.

    Args:
        d: Distance from AP to reference point (meters).
        P0: Reference power at distance d0 (dBm).
        d0: Reference distance (meters).
        n: Path-loss exponent (2.0 = free space, 2-4 = indoor).
        sigma: Shadow fading standard deviation (dBm). 0 disables fading.
        rng: Random generator for shadow fading.

    Returns:
        RSS in dBm.
    """
    if d < 0.1:
        d = 0.1  # Avoid singularity

    path_loss = -10 * n * np.log10(d / d0)

    shadow = 0.0
    if sigma > 0:
        rng = rng if rng is not None else np.random.default_rng()
        shadow = rng.normal() * sigma

    return float(P0 + path_loss + shadow)


def _ap_positions(area_size: Tuple[float, float], n_aps: int) -> np.ndarray:
    # Corners, mid-walls, then center
    width, height = area_size
    return np.array([
        [0, 0],
        [width, 0],
        [width, height],
        [0, height],
        [width / 2, 0],
        [width / 2, height],
        [0, height / 2],
        [width, height / 2],
        [width / 2, height / 2],
    ])[:n_aps]


def ap_mac(index: int) -> str:
    """Deterministic MAC-style identifier for the AP at ``index``."""
    return "02:00:00:00:{:02x}:{:02x}".format(index // 256, index % 256)


def generate_radio_map(
    area_size: Tuple[float, float] = (20.0, 20.0),
    grid_spacing: float = 2.0,
    n_aps: int = 8,
    detection_threshold: float = -85.0,
    P0: float = -30.0,
    path_loss_exponent: float = 3.5,
    shadow_sigma: float = 4.0,
    seed: int = 42,
) -> List[Fingerprint]:
    """
    Generate a synthetic single-floor radio map.

    Args:
        area_size: (width, height) in meters.
        grid_spacing: Distance between reference points (meters).
        n_aps: Number of access points (1-9).
        detection_threshold: APs weaker than this (dBm) are not heard.
        P0: RSS at 1 m (dBm).
        path_loss_exponent: Indoor path-loss exponent.
        shadow_sigma: Shadow fading standard deviation (dBm).
        seed: Random seed for reproducibility.

    Returns:
        Fingerprints in grid order (x outer, y inner) with integer RSS.

    Raises:
        ValueError: If parameters are out of range.
    """
    if grid_spacing <= 0:
        raise ValueError(f"grid_spacing must be positive, got {grid_spacing}")
    if not 1 <= n_aps <= 9:
        raise ValueError(f"n_aps must be between 1 and 9, got {n_aps}")

    rng = np.random.default_rng(seed)
    width, height = area_size
    ap_positions = _ap_positions(area_size, n_aps)

    x_coords = np.arange(0, width + grid_spacing / 2, grid_spacing)
    y_coords = np.arange(0, height + grid_spacing / 2, grid_spacing)

    radio_map = []
    for x in x_coords:
        for y in y_coords:
            rp = np.array([x, y])
            signals = {}
            for i, ap_pos in enumerate(ap_positions):
                rss = log_distance_path_loss(
                    float(np.linalg.norm(rp - ap_pos)),
                    P0=P0,
                    n=path_loss_exponent,
                    sigma=shadow_sigma,
                    rng=rng,
                )
                if rss >= detection_threshold:
                    signals[ap_mac(i)] = int(round(rss))
            radio_map.append(
                Fingerprint(signals=signals, center=rp, class_name="Fingerprint")
            )

    return radio_map
