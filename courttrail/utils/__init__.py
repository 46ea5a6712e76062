"""
Utility functions shared across the court trail modules.
"""

from .angles import (
    normalize_angle,
    normalize_angle_array,
    degrees_to_radians,
    radians_to_degrees,
)

__all__ = [
    'normalize_angle',
    'normalize_angle_array',
    'degrees_to_radians',
    'radians_to_degrees',
]
