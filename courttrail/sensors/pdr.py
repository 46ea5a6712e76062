"""
Pedestrian Dead Reckoning (PDR) on a court.

This module implements step-and-heading navigation for a wrist-worn device:
    - Relative heading (latched yaw minus calibration heading)
    - Court-frame step update (-L·sin ψ, L·cos ψ)
    - Distance-delta step source with a noise floor (default)
    - Acceleration-magnitude hysteresis step source (fixed step length)
    - Wrist-rotation gate against arm-swing/gesture artifacts

PDR here uses:
    - Step displacement from the pedometer's cumulative distance, or a
      fixed step length per detected acceleration peak
    - Heading from the most recent device attitude yaw ("latched yaw")
    - A single reference heading captured at calibration

Frame Conventions:
    - Court frame: origin at the calibration point, +y facing the net.
    - Headings increase clockwise (compass-like); see
      courttrail.sensors.types for the full convention.

There is no drift correction beyond the single reference heading and no
claim of absolute accuracy.
"""

import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from courttrail.sensors.types import CalibrationFrame, MotionSample, PdrConfig
from courttrail.path import PathStore, Position
from courttrail.utils.angles import normalize_angle


def total_accel_magnitude(accel_b: np.ndarray) -> float:
    """
    Compute the magnitude of a 3D acceleration vector.

        a_mag = ||a|| = √(ax² + ay² + az²)

    The device-motion channel delivers user acceleration with gravity
    already removed, so a wearer standing still reads ≈ 0 and foot strikes
    show up as short peaks of a few tenths of g.

    Args:
        accel_b: Acceleration in the device frame.
                 Shape: (3,). Units: g.

    Returns:
        Acceleration magnitude (always non-negative).

    Example:
        >>> total_accel_magnitude(np.array([0.3, 0.0, 0.4]))
        0.5
    """
    accel_b = np.asarray(accel_b, dtype=float)
    if accel_b.shape != (3,):
        raise ValueError(f"accel_b must have shape (3,), got {accel_b.shape}")

    return float(np.linalg.norm(accel_b))


def relative_heading(yaw: float, calibration: CalibrationFrame) -> float:
    """
    Heading of the wearer relative to the court's +y axis.

        ψ = normalize(yaw - reference_heading)  ∈ [-π, π)

    Args:
        yaw: Latched device yaw. Units: rad.
        calibration: Reference heading captured before the session.

    Returns:
        Relative heading. Units: rad.
    """
    return normalize_angle(yaw - calibration.reference_heading)


def court_step_update(
    p_prev_xy: np.ndarray,
    step_len: float,
    heading_rad: float,
) -> np.ndarray:
    """
    Update the 2D court position from one step.

        p_k = p_{k-1} + L * [-sin(ψ), cos(ψ)]^T

    where:
        p_k: position after step k [m]
        L: step length or distance delta [m]
        ψ: heading relative to the court's +y axis [rad]

    With ψ = 0 the walker moves straight toward the net (+y). Because
    headings increase clockwise, ψ = +π/2 moves along -x and ψ = -π/2
    along +x.

    Args:
        p_prev_xy: Previous position, shape (2,). Units: m.
        step_len: Displacement length. Units: m. Must be non-negative.
        heading_rad: Relative heading ψ. Units: rad.

    Returns:
        Updated position, shape (2,). Units: m.

    Example:
        >>> court_step_update(np.zeros(2), 1.0, 0.0)
        array([0., 1.])
    """
    p_prev_xy = np.asarray(p_prev_xy, dtype=float)
    if p_prev_xy.shape != (2,):
        raise ValueError(f"p_prev_xy must have shape (2,), got {p_prev_xy.shape}")
    if step_len < 0:
        raise ValueError(f"step_len must be non-negative, got {step_len}")

    direction = np.array([-np.sin(heading_rad), np.cos(heading_rad)])
    return p_prev_xy + step_len * direction


class RotationRateGate:
    """
    Suppress position updates while the wrist is rotating quickly.

    A rotation rate above ``limit`` on any axis is treated as an arm swing or
    gesture. Every attitude tick replaces the gate state, and a tick without
    a rotation rate opens the gate again. A pedometer tick arriving between
    device-motion ticks is judged by the latest state; once it has been
    gated the engine releases the gate, so one spike blocks one update.
    """

    def __init__(self, limit: Optional[float]):
        self.limit = limit
        self._blocked = False

    def observe(self, rotation_rate: Optional[np.ndarray]) -> None:
        if self.limit is None:
            return
        self._blocked = rotation_rate is not None and bool(
            np.any(np.abs(rotation_rate) > self.limit)
        )

    @property
    def blocked(self) -> bool:
        return self._blocked

    def reset(self) -> None:
        self._blocked = False


class AccelStepDetector:
    """
    Step detector with magnitude hysteresis.

    A step is entered when the acceleration magnitude rises above
    ``threshold_high`` and the detector is armed. It re-arms only after the
    magnitude falls below ``threshold_low``, so a single foot strike that
    rings above the high threshold for several samples counts once.

    Example:
        >>> det = AccelStepDetector(0.35, 0.15)
        >>> [det.update(np.array([m, 0.0, 0.0])) for m in (0.4, 0.5, 0.1, 0.4)]
        [True, False, False, True]
    """

    def __init__(self, threshold_high: float = 0.35, threshold_low: float = 0.15):
        if not 0 <= threshold_low < threshold_high:
            raise ValueError(
                f"Need 0 <= threshold_low < threshold_high, got "
                f"{threshold_low} and {threshold_high}"
            )
        self.threshold_high = threshold_high
        self.threshold_low = threshold_low
        self.in_step = False

    def update(self, accel: np.ndarray) -> bool:
        """Feed one acceleration sample; return True when a new step starts."""
        magnitude = total_accel_magnitude(accel)
        if magnitude > self.threshold_high and not self.in_step:
            self.in_step = True
            return True
        if magnitude < self.threshold_low:
            self.in_step = False
        return False

    def reset(self) -> None:
        self.in_step = False


@dataclass
class PdrStats:
    """Per-session counters. Rejections here are not failures."""

    samples: int = 0
    positions: int = 0
    noise_rejected: int = 0
    gated: int = 0


class DeadReckoningEngine:
    """
    Stateful transformer from motion samples to court-frame positions.

    The engine owns the live path while it is running: it is the only
    writer. Each accepted sample appends at most one position.

    Distance source (default):
        1. A yaw-bearing sample latches the yaw. No position on its own.
        2. A distance-bearing sample gives delta = d - last_distance.
           - delta <= 0: noise or counter reset. Nothing is appended and
             last_distance never moves downward.
           - 0 < delta < step_noise_floor: jitter, ignored entirely.
           - otherwise last_distance := d and the position advances by
             delta along the relative heading.

    Accel source:
        Each step entered by the AccelStepDetector advances the position by
        the configured fixed step length along the relative heading.
        Distance samples are ignored.

    When the rotation gate is blocked, the position update of that tick is
    suppressed and no distance is consumed, so the displacement is credited
    to the next ungated tick. A combined tick (on_motion_sample) is judged
    by its own rotation rate only.

    Calls made while the engine is not running are silent no-ops: the
    source may still have a sample in flight after a stop request.

    Args:
        calibration: Reference heading for the session.
        path: Path store to write to. Default: a fresh PathStore.
        config: PDR parameters. Default: PdrConfig().

    Example:
        >>> engine = DeadReckoningEngine(CalibrationFrame(0.0))
        >>> engine.start()
        >>> engine.on_motion_sample(MotionSample(yaw=0.0, cumulative_distance=1.0))
        Position(x=0.0, y=1.0)
    """

    def __init__(
        self,
        calibration: CalibrationFrame,
        path: Optional[PathStore] = None,
        config: Optional[PdrConfig] = None,
    ):
        self.calibration = calibration
        self.path = path if path is not None else PathStore()
        self.config = config if config is not None else PdrConfig()

        self._lock = threading.Lock()
        self._running = False
        self._gate = RotationRateGate(self.config.rotation_rate_limit)
        self._detector = AccelStepDetector(
            self.config.accel_threshold_high, self.config.accel_threshold_low
        )
        self._reset_accumulators()

    def _reset_accumulators(self) -> None:
        self.latched_yaw = 0.0
        self.last_distance: Optional[float] = None
        self.stats = PdrStats()
        self._gate.reset()
        self._detector.reset()

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Reset the path to [(0, 0)] and the accumulators, then accept samples."""
        with self._lock:
            self.path.reset()
            self._reset_accumulators()
            self._running = True

    def stop(self) -> None:
        """Stop accepting samples. Samples arriving later are ignored."""
        with self._lock:
            self._running = False

    def on_motion_sample(self, sample: MotionSample) -> Optional[Position]:
        """Process every field of ``sample`` as one atomic tick."""
        return self._process(sample, attitude=True, distance=True)

    def on_device_motion(self, sample: MotionSample) -> Optional[Position]:
        """Handler for the device-motion channel (yaw, rates, acceleration)."""
        return self._process(sample, attitude=True, distance=False)

    def on_pedometer(self, sample: MotionSample) -> Optional[Position]:
        """Handler for the pedometer channel (cumulative distance)."""
        return self._process(sample, attitude=False, distance=True)

    def _process(
        self, sample: MotionSample, attitude: bool, distance: bool
    ) -> Optional[Position]:
        with self._lock:
            if not self._running:
                return None
            self.stats.samples += 1

            step_len = None
            if attitude:
                if sample.yaw is not None:
                    self.latched_yaw = sample.yaw
                self._gate.observe(sample.rotation_rate)
                if (
                    self.config.step_source == 'accel'
                    and sample.linear_acceleration is not None
                    and self._detector.update(sample.linear_acceleration)
                ):
                    step_len = self.config.step_length
                    if self._gate.blocked:
                        self.stats.gated += 1
                        return None

            if (
                distance
                and self.config.step_source == 'distance'
                and sample.cumulative_distance is not None
            ):
                step_len = self._consume_distance(sample.cumulative_distance)

            if step_len is None:
                return None
            return self._advance(step_len)

    def _consume_distance(self, cumulative_distance: float) -> Optional[float]:
        last = 0.0 if self.last_distance is None else self.last_distance
        delta = cumulative_distance - last
        if delta <= 0 or delta < self.config.step_noise_floor:
            self.stats.noise_rejected += 1
            return None
        if self._gate.blocked:
            self.stats.gated += 1
            self._gate.reset()
            return None
        self.last_distance = cumulative_distance
        return delta

    def _advance(self, step_len: float) -> Position:
        psi = relative_heading(self.latched_yaw, self.calibration)
        p_next = court_step_update(np.asarray(self.path.last), step_len, psi)
        position = Position(float(p_next[0]), float(p_next[1]))
        self.path.append(position)
        self.stats.positions += 1
        return position
