"""
Evaluation and Visualization Module.

This module provides evaluation metrics and visualization utilities
for fingerprint positioning.

Modules:
    metrics: Error metrics (distance, RMSE, error statistics)
    plots: Error CDF and radio-map-size sweep figures
"""

from .metrics import (
    compute_error_stats,
    compute_position_errors,
    compute_rmse,
    distance_between,
    error_magnitudes,
)
from .plots import plot_error_cdf, plot_neighbor_sweep, save_figure

__all__ = [
    # Metrics
    "distance_between",
    "compute_position_errors",
    "compute_rmse",
    "compute_error_stats",
    "error_magnitudes",
    # Plots
    "plot_error_cdf",
    "plot_neighbor_sweep",
    "save_figure",
]
