"""
Wearable motion input and pedestrian dead reckoning.

Modules:
    types: Calibration frame, motion sample packets, PDR configuration
    source: Motion sample source interface and cancellable subscriptions
    pdr: Step sources, rotation gate and the dead-reckoning engine

Design principles:
    - Sample packets and configuration are frozen (immutable) dataclasses
    - The engine is the single writer of the live path
    - Sensor anomalies degrade the trail, they never abort a session

Example:
    >>> from courttrail.sensors import (
    ...     CalibrationFrame, MotionSample, DeadReckoningEngine
    ... )
    >>> engine = DeadReckoningEngine(CalibrationFrame.from_degrees(90.0))
    >>> engine.start()
    >>> engine.on_motion_sample(MotionSample(yaw=1.5707963267948966))
    >>> engine.on_motion_sample(MotionSample(cumulative_distance=2.0))
    Position(x=0.0, y=2.0)
"""

from courttrail.sensors.types import (
    DEVICE_MOTION,
    PEDOMETER,
    SAMPLE_KINDS,
    STEP_NOISE_FLOOR,
    CalibrationFrame,
    MotionSample,
    PdrConfig,
)

from courttrail.sensors.source import (
    SubscriptionHandle,
    MotionSampleSource,
    ReplaySampleSource,
    classify_sample,
)

from courttrail.sensors.pdr import (
    total_accel_magnitude,
    relative_heading,
    court_step_update,
    RotationRateGate,
    AccelStepDetector,
    PdrStats,
    DeadReckoningEngine,
)

__all__ = [
    # Data types
    "DEVICE_MOTION",
    "PEDOMETER",
    "SAMPLE_KINDS",
    "STEP_NOISE_FLOOR",
    "CalibrationFrame",
    "MotionSample",
    "PdrConfig",
    # Sources
    "SubscriptionHandle",
    "MotionSampleSource",
    "ReplaySampleSource",
    "classify_sample",
    # PDR
    "total_accel_magnitude",
    "relative_heading",
    "court_step_update",
    "RotationRateGate",
    "AccelStepDetector",
    "PdrStats",
    "DeadReckoningEngine",
]
