"""
Visualization utilities for fingerprint positioning results.

Author: Navigation Engineer
Date: 2024
"""

from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np

from .metrics import error_magnitudes


def plot_error_cdf(
    errors_dict: Dict[str, np.ndarray], title: str = "Error CDF"
) -> plt.Figure:
    """
    Plot the empirical CDF of position errors, one step curve per run.

    Args:
        errors_dict: Run name to errors. 1-D arrays are distances in meters;
            N x 2 arrays are error vectors and are reduced to their norms.
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    for name, errors in errors_dict.items():
        distances = np.sort(error_magnitudes(errors))
        fraction = np.arange(1, distances.size + 1) / distances.size
        ax.step(distances, fraction, where="post", label=name, linewidth=2)

    ax.set_xlabel("Position Error (m)", fontsize=12)
    ax.set_ylabel("Fraction of queries", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.set_xlim(left=0)
    ax.set_ylim([0, 1.05])

    plt.tight_layout()
    return fig


def plot_neighbor_sweep(
    n_references: Sequence[int],
    errors: Sequence[float],
    title: str = "Error vs Radio Map Size",
) -> plt.Figure:
    """
    Plot position error against the number of references available.

    Args:
        n_references: Radio map size for each run.
        errors: Position error (m) for each run. NaN marks failed runs.
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    n_references = np.asarray(n_references)
    errors = np.asarray(errors, dtype=float)
    failed = np.isnan(errors)

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(n_references[~failed], errors[~failed], "o-", color="blue", label="Error")
    if np.any(failed):
        ax.plot(
            n_references[failed],
            np.zeros(np.sum(failed)),
            "x",
            color="red",
            label="No comparable references",
        )

    ax.set_xlabel("Reference fingerprints", fontsize=12)
    ax.set_ylabel("Position Error (m)", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.invert_xaxis()
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Tuple[str, ...] = ("svg", "pdf", "png"),
) -> List[Path]:
    """
    Save figure in multiple formats.

    Args:
        fig: Matplotlib figure to save
        out_dir: Output directory
        name: Base filename (without extension)
        formats: Tuple of format extensions

    Returns:
        paths: List of saved file paths
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for fmt in formats:
        filepath = out_dir / f"{name}.{fmt}"
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        paths.append(filepath)

    return paths
