"""
Evaluation Metrics for fingerprint positioning.

Compares locator estimates with the surveyed centers of the query
fingerprints. All distances are in the radio map's coordinate units.

Author: Navigation Engineer
Date: 2024
"""

from typing import Dict, Optional, Union

import numpy as np


def distance_between(a: np.ndarray, b: np.ndarray) -> float:
    """
    Euclidean distance between two 2D points.

    Examples:
        >>> distance_between(np.array([0.0, 0.0]), np.array([3.0, 4.0]))
        5.0
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise ValueError(f"Shape mismatch: {a.shape} vs {b.shape}")
    return float(np.linalg.norm(b - a))


def error_magnitudes(errors: np.ndarray) -> np.ndarray:
    """Reduce (N, 2) error vectors to distances; pass (N,) distances through."""
    errors = np.asarray(errors, dtype=float)
    if errors.ndim > 1:
        return np.linalg.norm(errors, axis=1)
    return np.abs(errors)


def compute_position_errors(
    truth: np.ndarray, estimated: np.ndarray
) -> np.ndarray:
    """
    Error vectors ``estimated - truth`` for N located queries.

    Raises:
        ValueError: If the two arrays differ in shape
    """
    truth = np.asarray(truth, dtype=float)
    estimated = np.asarray(estimated, dtype=float)
    if truth.shape != estimated.shape:
        raise ValueError(
            f"Shape mismatch: truth {truth.shape} vs estimated {estimated.shape}"
        )
    return estimated - truth


def compute_rmse(errors: np.ndarray, axis: Optional[int] = None) -> Union[float, np.ndarray]:
    """
    Root mean square of the error components.

    With ``axis=None`` a single value over every component is returned;
    ``axis=0`` gives one value per coordinate.
    """
    squared = np.square(np.asarray(errors, dtype=float))
    if axis is None:
        return float(np.sqrt(squared.mean()))
    return np.sqrt(squared.mean(axis=axis))


def compute_error_stats(errors: np.ndarray) -> Dict[str, float]:
    """
    Summarize a leave-one-out or batch run.

    Args:
        errors: Error vectors (N, 2) or distances (N,)

    Returns:
        Dictionary with ``count``, ``mean``, ``median``, ``std``, ``rmse``,
        ``p90`` and ``max`` of the error distances.

    Raises:
        ValueError: If ``errors`` is empty
    """
    distances = error_magnitudes(errors)
    if distances.size == 0:
        raise ValueError("Cannot compute statistics of an empty error set")

    return {
        "count": int(distances.size),
        "mean": float(distances.mean()),
        "median": float(np.median(distances)),
        "std": float(distances.std()),
        "rmse": float(np.sqrt(np.mean(distances**2))),
        "p90": float(np.percentile(distances, 90)),
        "max": float(distances.max()),
    }
