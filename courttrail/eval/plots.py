"""
Offline visualization of trails and heatmap grids.

These figures are for inspecting recorded sessions (example script,
notebooks). They are not the on-device renderer.

All functions return matplotlib Figure objects for flexible display/saving.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np

from courttrail.heatmap.grid import Grid, Rect


def plot_trail(
    trails_xy: Dict[str, np.ndarray],
    bounds: Optional[Rect] = None,
    title: str = "Court Trail",
) -> plt.Figure:
    """
    Plot one or more 2D trails in the court frame.

    Args:
        trails_xy: Dictionary of trails {name: array of shape (N, 2)}
        bounds: Court rectangle to outline (optional)
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(8, 8))

    colors = ["blue", "red", "green", "orange", "purple"]
    linestyles = ["-", "--", "-.", ":", "-"]

    for i, (name, trail) in enumerate(trails_xy.items()):
        trail = np.asarray(trail, dtype=float).reshape(-1, 2)
        ax.plot(
            trail[:, 0],
            trail[:, 1],
            linestyle=linestyles[i % len(linestyles)],
            color=colors[i % len(colors)],
            marker=".",
            linewidth=1.5,
            label=name,
            alpha=0.8,
        )

    ax.plot(0.0, 0.0, "go", markersize=10, label="Calibration point", zorder=11)

    if bounds is not None:
        ax.add_patch(
            plt.Rectangle(
                (bounds.min_x, bounds.min_y),
                bounds.width,
                bounds.height,
                fill=False,
                edgecolor="black",
                linewidth=1.5,
            )
        )

    ax.annotate("net", xy=(0.0, 1.0), xycoords=("data", "axes fraction"),
                ha="center", va="bottom")
    ax.set_xlabel("X (m)", fontsize=12)
    ax.set_ylabel("Y (m)", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.axis("equal")

    plt.tight_layout()
    return fig


def plot_heatmap(
    grid: Grid,
    bounds: Rect,
    trail_xy: Optional[np.ndarray] = None,
    title: str = "Trail Heatmap",
) -> plt.Figure:
    """
    Plot a heatmap grid over its world bounds.

    Row 0 of the grid holds the highest y values, so the image is drawn
    with its origin at the top.

    Args:
        grid: Grid from bin_points()
        bounds: World bounds the grid was binned with
        trail_xy: Trail to overlay, shape (N, 2) (optional)
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(8, 8))

    masked = np.ma.masked_equal(grid.intensity(), 0.0)
    im = ax.imshow(
        masked,
        extent=(bounds.min_x, bounds.max_x, bounds.min_y, bounds.max_y),
        origin="upper",
        cmap="jet",
        vmin=0.0,
        vmax=1.0,
        aspect="auto",
        interpolation="nearest",
    )

    cbar = plt.colorbar(im, ax=ax)
    cbar.set_label(f"Intensity (max count = {grid.max_value})", fontsize=12)

    if trail_xy is not None:
        trail_xy = np.asarray(trail_xy, dtype=float).reshape(-1, 2)
        ax.plot(trail_xy[:, 0], trail_xy[:, 1], "w-", linewidth=1.0, alpha=0.7)

    ax.set_xlabel("X (m)", fontsize=12)
    ax.set_ylabel("Y (m)", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")

    plt.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Tuple[str, ...] = ("svg", "png"),
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
