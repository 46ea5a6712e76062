"""
Angle normalization and unit helpers.

Provides functions for keeping headings within the half-open range [-π, π)
used by the court frame.

Critical for:
- Calibration headings captured in degrees or radians
- Relative heading (device yaw minus reference heading) in the PDR update
"""

import math
from typing import Union

import numpy as np

TWO_PI = 2.0 * math.pi


def normalize_angle(angle: float) -> float:
    """
    Normalize an angle to the half-open range [-π, π).

    The value is first reduced with ``math.fmod`` so that very large inputs
    do not need thousands of iterations, then brought into range by
    repeated ±2π adjustment. The upper end is open: an input of exactly π
    (or any odd multiple of it) maps to -π.

    Args:
        angle: Angle in radians (any finite value).

    Returns:
        Equivalent angle in [-π, π).

    Raises:
        ValueError: If ``angle`` is NaN or infinite.

    Example:
        >>> normalize_angle(3.5 * math.pi)
        -1.5707963267948966
        >>> normalize_angle(math.pi)
        -3.141592653589793
    """
    angle = float(angle)
    if not math.isfinite(angle):
        raise ValueError(f"angle must be finite, got {angle}")

    wrapped = math.fmod(angle, TWO_PI)
    while wrapped < -math.pi:
        wrapped += TWO_PI
    while wrapped >= math.pi:
        wrapped -= TWO_PI
    return wrapped


def normalize_angle_array(angles: np.ndarray) -> np.ndarray:
    """
    Normalize an array of angles to [-π, π).

    Vectorized version of normalize_angle().

    Example:
        >>> normalize_angle_array(np.array([0.0, np.pi, -np.pi, 3 * np.pi]))
        array([ 0.        , -3.14159265, -3.14159265, -3.14159265])
    """
    angles = np.asarray(angles, dtype=float)
    wrapped = np.mod(angles + np.pi, TWO_PI) - np.pi
    # np.mod can round up to exactly 2π for tiny negative arguments
    return np.where(wrapped >= np.pi, wrapped - TWO_PI, wrapped)


def degrees_to_radians(degrees: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Convert degrees to radians."""
    return np.deg2rad(degrees)


def radians_to_degrees(radians: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Convert radians to degrees."""
    return np.rad2deg(radians)
