"""
Heatmap aggregation of court-frame points.
"""

from courttrail.heatmap.grid import (
    SPAN_EPSILON,
    DEFAULT_COURT_BOUNDS,
    Rect,
    Grid,
    HeatmapConfig,
    bin_points,
    grid_dims_for_extent,
)

__all__ = [
    "SPAN_EPSILON",
    "DEFAULT_COURT_BOUNDS",
    "Rect",
    "Grid",
    "HeatmapConfig",
    "bin_points",
    "grid_dims_for_extent",
]
