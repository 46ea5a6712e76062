"""
Simulation utilities for generating synthetic wearable motion streams.

This package provides a forward model that converts an ideal walk on the
court into the sample streams a wrist-worn device would deliver.

Modules:
    court_walk: Waypoint walk -> device-motion and pedometer samples

The forward model follows the same conventions as the PDR engine:
    - Yaw is compass-like (clockwise) and shares the calibration reference
    - Linear acceleration is gravity-free, in g, peaking once per step
    - Cumulative distance is monotonic non-decreasing
"""

from courttrail.sim.court_walk import (
    court_loop_waypoints,
    interpolate_along_path,
    generate_court_walk,
)

__all__ = [
    "court_loop_waypoints",
    "interpolate_along_path",
    "generate_court_walk",
]
