"""
Data structures for wearable motion input and PDR configuration.

This module defines the shared data types used by the dead-reckoning engine:
    - Calibration frame (one reference heading captured before a session)
    - Motion sample packets (attitude, rotation rate, acceleration, distance)
    - PDR configuration (noise floor, rotation gate, step source)

Court Frame Convention:
    - Origin: the point where the calibration heading was captured.
    - +y: "facing the net", i.e. the reference heading at calibration time.
    - +x: to the right of +y when seen from above.
    - Headings are compass-like: they increase clockwise. A positive
      relative heading (yaw - reference) rotates the walking direction
      from +y toward -x, so a step of length L at relative heading ψ moves
      the walker by (-L·sin ψ, L·cos ψ).

Time Base Convention:
    Optional timestamps are float seconds (monotonic).

Sample Kinds:
    Samples arrive on two independent delivery channels:
        'device_motion': yaw, rotation rate and linear acceleration
        'pedometer':     cumulative walked distance
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Literal, Optional

import numpy as np

from courttrail.utils.angles import normalize_angle

DEVICE_MOTION = 'device_motion'
PEDOMETER = 'pedometer'
SAMPLE_KINDS = (DEVICE_MOTION, PEDOMETER)

STEP_NOISE_FLOOR = 0.1  # m


@dataclass(frozen=True)
class CalibrationFrame:
    """
    Reference heading that defines the court frame.

    Captured once, before a session becomes active, and immutable from then
    on. The heading is stored in radians normalized to [-π, π).

    Attributes:
        reference_heading: Device heading at calibration time. Units: rad.

    Example:
        >>> frame = CalibrationFrame.from_degrees(270.0)
        >>> round(frame.reference_heading, 4)
        -1.5708
    """

    reference_heading: float

    def __post_init__(self) -> None:
        """Validate and normalize the reference heading."""
        if isinstance(self.reference_heading, bool) or not isinstance(
            self.reference_heading, (int, float, np.integer, np.floating)
        ):
            raise TypeError(
                f"reference_heading must be numeric, got "
                f"{type(self.reference_heading)}"
            )
        if not math.isfinite(self.reference_heading):
            raise ValueError(
                f"reference_heading must be finite, got {self.reference_heading}"
            )
        object.__setattr__(
            self, 'reference_heading', normalize_angle(self.reference_heading)
        )

    @classmethod
    def from_radians(cls, heading_rad: float) -> "CalibrationFrame":
        """Create a calibration frame from a heading in radians."""
        return cls(reference_heading=heading_rad)

    @classmethod
    def from_degrees(cls, heading_deg: float) -> "CalibrationFrame":
        """Create a calibration frame from a compass heading in degrees."""
        if isinstance(heading_deg, bool) or not isinstance(
            heading_deg, (int, float, np.integer, np.floating)
        ):
            raise TypeError(f"heading_deg must be numeric, got {type(heading_deg)}")
        return cls(reference_heading=math.radians(heading_deg))

    @property
    def reference_heading_deg(self) -> float:
        return math.degrees(self.reference_heading)


def _as_vector3(name: str, value: Any) -> Optional[np.ndarray]:
    if value is None:
        return None
    vec = np.asarray(value, dtype=float)
    if vec.shape != (3,):
        raise ValueError(f"{name} must have shape (3,), got {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise ValueError(f"{name} must be finite, got {vec}")
    vec.setflags(write=False)
    return vec


def _as_finite(name: str, value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(
        value, (int, float, np.integer, np.floating)
    ):
        raise TypeError(f"{name} must be numeric, got {type(value)}")
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


@dataclass(frozen=True)
class MotionSample:
    """
    One motion notification from the wearable.

    Not every field is populated by every sample: attitude, rotation rate
    and acceleration arrive on the device-motion channel, cumulative
    distance on the pedometer channel, asynchronously. Any subset may be
    present.

    Attributes:
        yaw: Device attitude yaw. Units: rad. Same reference as the
             calibration heading.
        rotation_rate: Rotation rate about the device axes, shape (3,).
                       Units: rad/s.
        linear_acceleration: User (gravity-free) acceleration, shape (3,).
                             Units: g, as delivered by the platform.
        cumulative_distance: Walked distance since the pedometer started.
                             Units: m. Monotonic non-decreasing in a
                             healthy stream.
        t: Optional timestamp. Units: s.

    Notes:
        - Vector fields are converted to read-only float arrays.
        - Non-finite values are rejected at construction.

    Example:
        >>> MotionSample(yaw=0.3).has_yaw
        True
        >>> MotionSample(cumulative_distance=2.5).has_distance
        True
    """

    yaw: Optional[float] = None
    rotation_rate: Optional[np.ndarray] = None
    linear_acceleration: Optional[np.ndarray] = None
    cumulative_distance: Optional[float] = None
    t: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate field types, shapes and finiteness."""
        object.__setattr__(self, 'yaw', _as_finite('yaw', self.yaw))
        object.__setattr__(
            self, 'rotation_rate', _as_vector3('rotation_rate', self.rotation_rate)
        )
        object.__setattr__(
            self,
            'linear_acceleration',
            _as_vector3('linear_acceleration', self.linear_acceleration),
        )
        object.__setattr__(
            self,
            'cumulative_distance',
            _as_finite('cumulative_distance', self.cumulative_distance),
        )
        object.__setattr__(self, 't', _as_finite('t', self.t))

    @property
    def has_yaw(self) -> bool:
        return self.yaw is not None

    @property
    def has_distance(self) -> bool:
        return self.cumulative_distance is not None

    @property
    def has_device_motion(self) -> bool:
        return (
            self.yaw is not None
            or self.rotation_rate is not None
            or self.linear_acceleration is not None
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain-JSON representation; absent fields are omitted."""
        out: Dict[str, Any] = {}
        for name in ('yaw', 'cumulative_distance', 't'):
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        for name in ('rotation_rate', 'linear_acceleration'):
            value = getattr(self, name)
            if value is not None:
                out[name] = value.tolist()
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MotionSample":
        unknown = set(data) - {
            'yaw', 'rotation_rate', 'linear_acceleration', 'cumulative_distance', 't'
        }
        if unknown:
            raise ValueError(f"Unknown MotionSample fields: {sorted(unknown)}")
        return cls(**data)


@dataclass(frozen=True)
class PdrConfig:
    """
    Tuning parameters for the dead-reckoning engine.

    Attributes:
        step_noise_floor: Minimum distance delta treated as genuine motion.
                          Units: m. Default: 0.1 m.
        rotation_rate_limit: Wrist-rotation gate. When set, a tick whose
                             rotation rate exceeds this value on any axis
                             produces no position. Units: rad/s.
                             Default: None (gate disabled). Typical: 1.0.
        step_source: 'distance' (pedometer distance deltas, default) or
                     'accel' (acceleration-magnitude hysteresis with a
                     fixed step length).
        step_length: Fixed step length for the 'accel' source. Units: m.
        accel_threshold_high: Magnitude that enters a step. Units: g.
        accel_threshold_low: Magnitude that re-arms the detector. Units: g.
    """

    step_noise_floor: float = STEP_NOISE_FLOOR
    rotation_rate_limit: Optional[float] = None
    step_source: Literal['distance', 'accel'] = 'distance'
    step_length: float = 0.80
    accel_threshold_high: float = 0.35
    accel_threshold_low: float = 0.15

    def __post_init__(self) -> None:
        """Validate parameter ranges."""
        if self.step_noise_floor < 0:
            raise ValueError(
                f"step_noise_floor must be non-negative, got {self.step_noise_floor}"
            )
        if self.rotation_rate_limit is not None and self.rotation_rate_limit <= 0:
            raise ValueError(
                f"rotation_rate_limit must be positive, got {self.rotation_rate_limit}"
            )
        if self.step_source not in ('distance', 'accel'):
            raise ValueError(
                f"step_source must be 'distance' or 'accel', got '{self.step_source}'"
            )
        if self.step_length <= 0:
            raise ValueError(f"step_length must be positive, got {self.step_length}")
        if not 0 <= self.accel_threshold_low < self.accel_threshold_high:
            raise ValueError(
                f"Need 0 <= accel_threshold_low < accel_threshold_high, got "
                f"{self.accel_threshold_low} and {self.accel_threshold_high}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PdrConfig":
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown PdrConfig fields: {sorted(unknown)}")
        return cls(**data)
