"""
Trail summary metrics.

Used by the example script to summarize recorded sessions and, for
synthetic datasets, to compare the reconstructed trail against the
generated walk.
"""

from typing import Dict

import numpy as np


def compute_trail_length(trail_xy: np.ndarray) -> float:
    """
    Total walked length of a trail (sum of segment lengths).

    Args:
        trail_xy: Trail positions, shape (N, 2)

    Returns:
        length: Trail length in meters (0.0 for fewer than two points)
    """
    trail_xy = np.asarray(trail_xy, dtype=float).reshape(-1, 2)
    if len(trail_xy) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(trail_xy, axis=0), axis=1)))


def compute_position_errors(truth: np.ndarray, estimated: np.ndarray) -> np.ndarray:
    """
    Compute position errors between true and estimated positions.

    Args:
        truth: True positions, shape (N, 2)
        estimated: Estimated positions, shape (N, 2)

    Returns:
        errors: Position error vectors, shape (N, 2)

    Raises:
        ValueError: If inputs have incompatible shapes
    """
    truth = np.asarray(truth, dtype=float)
    estimated = np.asarray(estimated, dtype=float)

    if truth.shape != estimated.shape:
        raise ValueError(
            f"Shape mismatch: truth {truth.shape} vs estimated {estimated.shape}"
        )

    return estimated - truth


def compute_rmse(errors: np.ndarray) -> float:
    """Scalar RMSE of the error vector norms."""
    errors = np.asarray(errors, dtype=float)
    if errors.size == 0:
        return 0.0
    errors = errors.reshape(len(errors), -1)
    return float(np.sqrt(np.mean(np.sum(errors**2, axis=1))))


def summarize_trail(trail_xy: np.ndarray) -> Dict[str, float]:
    """
    Summary statistics of a trail.

    Returns:
        stats: Dictionary with keys:
               - 'n_points': Number of positions (including the origin)
               - 'length': Walked length (m)
               - 'final_x', 'final_y': Last position (m)
               - 'max_range': Largest distance from the origin (m)
    """
    trail_xy = np.asarray(trail_xy, dtype=float).reshape(-1, 2)
    if len(trail_xy) == 0:
        return {'n_points': 0, 'length': 0.0, 'final_x': 0.0,
                'final_y': 0.0, 'max_range': 0.0}
    return {
        'n_points': int(len(trail_xy)),
        'length': compute_trail_length(trail_xy),
        'final_x': float(trail_xy[-1, 0]),
        'final_y': float(trail_xy[-1, 1]),
        'max_range': float(np.max(np.linalg.norm(trail_xy, axis=1))),
    }
