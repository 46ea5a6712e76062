"""
Evaluation and Visualization Module.

This module provides trail summaries and offline figures for recorded
court sessions.

Modules:
    metrics: Trail length, position errors, RMSE, trail summary
    plots: Trail and heatmap figures
"""

from .metrics import (
    compute_position_errors,
    compute_rmse,
    compute_trail_length,
    summarize_trail,
)
from .plots import (
    plot_heatmap,
    plot_trail,
    save_figure,
)

__all__ = [
    # Metrics
    "compute_trail_length",
    "compute_position_errors",
    "compute_rmse",
    "summarize_trail",
    # Plots
    "plot_trail",
    "plot_heatmap",
    "save_figure",
]
