"""
Heatmap aggregation: bin court-frame points into an intensity grid.

Two bounding modes:
    - Fixed bounds: a world rectangle is mapped onto the grid. Points with
      either coordinate outside it are excluded, not clamped.
    - Auto bounds: the per-axis min/max of the points. An axis whose span
      is zero puts every point at normalized coordinate 0.5.

Cell mapping for a point (x, y):

    nx = (x - min_x) / max(span_x, ε)
    ny = (y - min_y) / max(span_y, ε)          ε = 1e-4
    col = clamp(floor(nx * cols), 0, cols - 1)
    row = clamp(floor((1 - ny) * rows), 0, rows - 1)

Row 0 holds the highest y values, matching a top-down image whose first
row is drawn at the top.

The grid only holds counts. Colour mapping and drawing belong to the
renderer; Grid.intensity() gives it values in [0, 1].
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

SPAN_EPSILON = 1e-4
COUNT_MAX = np.iinfo(np.int64).max


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned world rectangle in the court frame. Units: m.

    Edges are inclusive: a point lying exactly on an edge is inside.

    Example:
        >>> Rect.centered(6.0, 6.0)
        Rect(min_x=-6.0, min_y=-6.0, max_x=6.0, max_y=6.0)
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        """Validate that the rectangle is finite and well ordered."""
        values = (self.min_x, self.min_y, self.max_x, self.max_y)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Rect bounds must be finite, got {values}")
        if self.max_x < self.min_x or self.max_y < self.min_y:
            raise ValueError(
                f"Rect max must not be below min, got x=[{self.min_x}, {self.max_x}] "
                f"y=[{self.min_y}, {self.max_y}]"
            )
        for name in ('min_x', 'min_y', 'max_x', 'max_y'):
            object.__setattr__(self, name, float(getattr(self, name)))

    @classmethod
    def from_origin_size(cls, x: float, y: float, width: float, height: float) -> "Rect":
        """Rectangle with lower-left corner (x, y) and the given size."""
        return cls(x, y, x + width, y + height)

    @classmethod
    def centered(cls, half_width: float, half_height: float) -> "Rect":
        """Rectangle centred on the calibration point."""
        return cls(-half_width, -half_height, half_width, half_height)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def to_dict(self) -> Dict[str, float]:
        return {
            'min_x': self.min_x,
            'min_y': self.min_y,
            'max_x': self.max_x,
            'max_y': self.max_y,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rect":
        unknown = set(data) - {'min_x', 'min_y', 'max_x', 'max_y'}
        if unknown:
            raise ValueError(f"Unknown Rect fields: {sorted(unknown)}")
        return cls(**data)


# 12 m x 12 m square centred on the calibration point
DEFAULT_COURT_BOUNDS = Rect.centered(6.0, 6.0)


@dataclass(frozen=True, eq=False)
class Grid:
    """
    Intensity grid produced by bin_points().

    Attributes:
        cells: Per-cell point counts, shape (rows, cols), dtype int64.
               Read-only.
        max_value: Largest cell count (0 when the grid is empty).
    """

    cells: np.ndarray
    max_value: int = field(default=0)

    def __post_init__(self) -> None:
        cells = np.asarray(self.cells, dtype=np.int64)
        if cells.ndim != 2:
            raise ValueError(f"cells must be 2D, got shape {cells.shape}")
        if np.any(cells < 0):
            raise ValueError("cells must be non-negative")
        cells = cells.copy()
        cells.setflags(write=False)
        object.__setattr__(self, 'cells', cells)
        object.__setattr__(self, 'max_value', int(self.max_value))

    @property
    def rows(self) -> int:
        return self.cells.shape[0]

    @property
    def cols(self) -> int:
        return self.cells.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.cells.shape

    @property
    def total(self) -> int:
        """Number of points binned."""
        return int(self.cells.sum())

    @property
    def is_empty(self) -> bool:
        return self.max_value == 0

    def intensity(self) -> np.ndarray:
        """Cell counts scaled by max_value into [0, 1]; all zeros when empty."""
        if self.max_value == 0:
            return np.zeros(self.shape, dtype=float)
        return self.cells.astype(float) / float(self.max_value)

    def to_dict(self) -> Dict[str, Any]:
        """Aggregator API form: {"grid": rows x cols counts, "maxValue": int}."""
        return {'grid': self.cells.tolist(), 'maxValue': self.max_value}


def _as_point_array(points: Iterable[Sequence[float]]) -> np.ndarray:
    pts = np.asarray(list(points), dtype=float)
    if pts.size == 0:
        return pts.reshape(0, 2)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"points must have shape (N, 2), got {pts.shape}")
    return pts


def _normalize_axis(values: np.ndarray, lo: float, hi: float, auto: bool) -> np.ndarray:
    span = hi - lo
    if auto and span == 0:
        return np.full(values.shape, 0.5)
    if not math.isfinite(span):
        # Span exceeds the float range; halving keeps every term finite
        values, lo, span = values / 2.0, lo / 2.0, hi / 2.0 - lo / 2.0
    return (values - lo) / max(span, SPAN_EPSILON)


def bin_points(
    points: Iterable[Sequence[float]],
    bounds: Optional[Rect] = None,
    dims: Tuple[int, int] = (8, 8),
) -> Grid:
    """
    Bin a point set into a rows x cols count grid.

    Args:
        points: Court-frame points (x, y), any iterable of pairs
                (Position tuples, lists, or an (N, 2) array). Units: m.
        bounds: Fixed world bounds. Default: None (auto bounds from the
                points themselves).
        dims: Grid dimensions (rows, cols). Values below 1 are raised to 1.

    Returns:
        Grid with counts and max_value. Invariant:
        grid.total == number of points inside the bounds.

    Notes:
        - Points with a non-finite coordinate are excluded in both modes.
        - Every point is mapped independently with IEEE float64 arithmetic
          and counts are exact integer sums, so identical inputs always
          produce identical grids.
        - Counts saturate at the int64 maximum.
        - Bounds whose span overflows float64 (e.g. ±1e308) are still
          mapped without overflow.
        - Empty input, or every point excluded, gives an all-zero grid with
          max_value = 0.

    Example:
        >>> g = bin_points([(0.9, 0.9), (-0.9, -0.9), (5, 5)],
        ...                bounds=Rect(-1, -1, 1, 1), dims=(3, 3))
        >>> g.cells.tolist()
        [[0, 0, 1], [0, 0, 0], [1, 0, 0]]
        >>> g.max_value
        1
    """
    rows = max(int(dims[0]), 1)
    cols = max(int(dims[1]), 1)

    pts = _as_point_array(points)
    pts = pts[np.all(np.isfinite(pts), axis=1)]

    if bounds is not None:
        inside = (
            (pts[:, 0] >= bounds.min_x)
            & (pts[:, 0] <= bounds.max_x)
            & (pts[:, 1] >= bounds.min_y)
            & (pts[:, 1] <= bounds.max_y)
        )
        pts = pts[inside]

    if len(pts) == 0:
        return Grid(cells=np.zeros((rows, cols), dtype=np.int64), max_value=0)

    if bounds is not None:
        min_x, max_x = bounds.min_x, bounds.max_x
        min_y, max_y = bounds.min_y, bounds.max_y
    else:
        min_x, max_x = float(pts[:, 0].min()), float(pts[:, 0].max())
        min_y, max_y = float(pts[:, 1].min()), float(pts[:, 1].max())

    auto = bounds is None
    nx = _normalize_axis(pts[:, 0], min_x, max_x, auto)
    ny = _normalize_axis(pts[:, 1], min_y, max_y, auto)

    col = np.floor(np.nan_to_num(nx * cols, nan=0.0))
    row = np.floor(np.nan_to_num((1.0 - ny) * rows, nan=0.0))
    col = np.clip(col, 0, cols - 1).astype(np.int64)
    row = np.clip(row, 0, rows - 1).astype(np.int64)

    counts = np.bincount(row * cols + col, minlength=rows * cols)
    counts = np.minimum(counts, COUNT_MAX).astype(np.int64).reshape(rows, cols)

    return Grid(cells=counts, max_value=int(counts.max()))


def grid_dims_for_extent(
    width: float,
    height: float,
    min_cell: float = 12.0,
    min_dim: int = 8,
) -> Tuple[int, int]:
    """
    Choose (rows, cols) for a drawing area so no cell is smaller than min_cell.

    Args:
        width: Drawing width (pixels or any display unit).
        height: Drawing height, same unit as width.
        min_cell: Smallest cell edge. Default: 12.
        min_dim: Lower bound on both rows and cols. Default: 8.

    Example:
        >>> grid_dims_for_extent(350, 200)
        (16, 29)
    """
    if min_cell <= 0:
        raise ValueError(f"min_cell must be positive, got {min_cell}")
    if width < 0 or height < 0:
        raise ValueError(f"width and height must be non-negative, got {width}, {height}")
    rows = max(int(min_dim), int(height / min_cell))
    cols = max(int(min_dim), int(width / min_cell))
    return rows, cols


@dataclass(frozen=True)
class HeatmapConfig:
    """
    Heatmap binning parameters.

    Attributes:
        rows: Grid rows. Default: 8.
        cols: Grid columns. Default: 8.
        bounds: Fixed world bounds, or None for auto bounds.
    """

    rows: int = 8
    cols: int = 8
    bounds: Optional[Rect] = None

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"rows and cols must be >= 1, got {self.rows}x{self.cols}")
        if self.bounds is not None and not isinstance(self.bounds, Rect):
            object.__setattr__(self, 'bounds', Rect.from_dict(self.bounds))

    @property
    def dims(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def bin(self, points: Iterable[Sequence[float]]) -> Grid:
        return bin_points(points, bounds=self.bounds, dims=self.dims)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rows': self.rows,
            'cols': self.cols,
            'bounds': None if self.bounds is None else self.bounds.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HeatmapConfig":
        unknown = set(data) - {'rows', 'cols', 'bounds'}
        if unknown:
            raise ValueError(f"Unknown HeatmapConfig fields: {sorted(unknown)}")
        return cls(**data)
