"""
Session state machine for one calibrated walking session.

States and transitions:

    IDLE --calibrate--> CALIBRATED --start--> ACTIVE --stop/cancel--> ENDED
      ^                  |  ^                                           |
      |                  +--+ calibrate (overwrite)                     |
      +----------------------- after the transmission attempt ----------+
                               (or reset() when nothing was sent)

Any other request raises PreconditionViolation and leaves the state
unchanged.

Shutdown order matters. stop() first cancels every sample subscription,
then stops the engine, and only then freezes the path, flips the state to
ENDED and hands the path to the channel. A late sample can therefore never
mutate a path that has already been declared final.
"""

import threading
import warnings
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from courttrail.errors import (
    PreconditionViolation,
    SensorUnavailableWarning,
    TransportError,
)
from courttrail.path import PathStore, Position
from courttrail.sensors.pdr import DeadReckoningEngine, PdrStats
from courttrail.sensors.source import MotionSampleSource, SubscriptionHandle
from courttrail.sensors.types import (
    DEVICE_MOTION,
    PEDOMETER,
    CalibrationFrame,
    PdrConfig,
)
from courttrail.transport.channel import TrailChannel


class SessionState(Enum):
    """Lifecycle of a trail session."""

    IDLE = "idle"
    CALIBRATED = "calibrated"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass(frozen=True)
class SessionResult:
    """
    Outcome of ending a session.

    Attributes:
        path: Final, immutable path (always starts at the origin).
        sent: True if the channel accepted the path.
        error: Transport failure, if the hand-off was attempted and failed.
        sensor_available: False if the session ran degraded.
        stats: Engine counters for the session.
    """

    path: Tuple[Position, ...]
    sent: bool = False
    error: Optional[TransportError] = None
    sensor_available: bool = True
    stats: Optional[PdrStats] = None


def required_kinds(config: PdrConfig) -> Tuple[str, ...]:
    """Sample kinds the engine needs for the configured step source."""
    if config.step_source == 'accel':
        return (DEVICE_MOTION,)
    return (DEVICE_MOTION, PEDOMETER)


class TrailSession:
    """
    Calibrate, record and hand off one trail at a time.

    Args:
        source: Motion sample source (hardware adapter or replay).
        channel: Optional channel that receives the finished path.
        config: PDR parameters. Default: PdrConfig().

    Example:
        >>> from courttrail.sensors import ReplaySampleSource, MotionSample
        >>> src = ReplaySampleSource([MotionSample(yaw=0.0),
        ...                           MotionSample(cumulative_distance=1.0)])
        >>> session = TrailSession(src)
        >>> session.calibrate(0.0)
        CalibrationFrame(reference_heading=0.0)
        >>> session.start()
        >>> src.replay()
        2
        >>> session.stop().path
        (Position(x=0.0, y=0.0), Position(x=0.0, y=1.0))
    """

    def __init__(
        self,
        source: MotionSampleSource,
        channel: Optional[TrailChannel] = None,
        config: Optional[PdrConfig] = None,
    ):
        self.source = source
        self.channel = channel
        self.config = config if config is not None else PdrConfig()
        self.path = PathStore()

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._calibration: Optional[CalibrationFrame] = None
        self._engine: Optional[DeadReckoningEngine] = None
        self._handles: List[SubscriptionHandle] = []
        self._sensor_available = True
        self.last_result: Optional[SessionResult] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def calibration(self) -> Optional[CalibrationFrame]:
        return self._calibration

    @property
    def engine(self) -> Optional[DeadReckoningEngine]:
        return self._engine

    @property
    def sensor_available(self) -> bool:
        return self._sensor_available

    def _require(self, *allowed: SessionState, action: str) -> None:
        if self._state not in allowed:
            names = ", ".join(s.name for s in allowed)
            raise PreconditionViolation(
                f"Cannot {action} in state {self._state.name} (requires {names})"
            )

    def calibrate(self, heading: float, degrees: bool = False) -> CalibrationFrame:
        """
        Store the reference heading that defines the court frame.

        Args:
            heading: Device heading at the calibration point.
            degrees: True if ``heading`` is in degrees. Default: radians.

        Returns:
            The stored calibration frame.

        Raises:
            PreconditionViolation: If the session is ACTIVE or ENDED.
        """
        frame = (
            CalibrationFrame.from_degrees(heading)
            if degrees
            else CalibrationFrame.from_radians(heading)
        )
        with self._lock:
            self._require(
                SessionState.IDLE, SessionState.CALIBRATED, action="calibrate"
            )
            self._calibration = frame
            self._state = SessionState.CALIBRATED
        return frame

    def start(self) -> None:
        """
        Enter ACTIVE: reset the path and accumulators, subscribe to samples.

        A missing motion capability is not fatal: a SensorUnavailableWarning
        is emitted and the session runs with the path held at the origin.

        Raises:
            PreconditionViolation: If the session is not CALIBRATED.
        """
        with self._lock:
            self._require(SessionState.CALIBRATED, action="start")

            self._engine = DeadReckoningEngine(
                self._calibration, path=self.path, config=self.config
            )
            self._engine.start()

            kinds = required_kinds(self.config)
            missing = [k for k in kinds if not self.source.is_available(k)]
            self._sensor_available = not missing
            if missing:
                warnings.warn(
                    f"Motion capability unavailable ({', '.join(missing)}); "
                    f"session continues without PDR points",
                    SensorUnavailableWarning,
                    stacklevel=2,
                )
            else:
                handlers = {
                    DEVICE_MOTION: self._engine.on_device_motion,
                    PEDOMETER: self._engine.on_pedometer,
                }
                self._handles = [
                    self.source.subscribe(kind, handlers[kind]) for kind in kinds
                ]

            self._state = SessionState.ACTIVE

    def stop(self) -> SessionResult:
        """
        End the session and hand the path to the channel.

        With a channel, the session returns to IDLE after the transmission
        attempt, successful or not. Without one it stays ENDED until
        reset().

        Returns:
            SessionResult with the final path and transmission outcome.

        Raises:
            PreconditionViolation: If the session is not ACTIVE.
        """
        return self._end(transmit=True)

    def cancel(self) -> SessionResult:
        """
        Abort the session without transmitting.

        Whatever was appended before the cancellation stays valid. The
        session remains ENDED until reset().
        """
        return self._end(transmit=False)

    def reset(self) -> None:
        """Return from ENDED to IDLE, ready for a new calibration."""
        with self._lock:
            self._require(SessionState.ENDED, action="reset")
            self._state = SessionState.IDLE

    def _end(self, transmit: bool) -> SessionResult:
        with self._lock:
            self._require(
                SessionState.ACTIVE, action="stop" if transmit else "cancel"
            )

            for handle in self._handles:
                handle.cancel()
            self._handles = []
            self._engine.stop()

            final_path = self.path.freeze()
            self._state = SessionState.ENDED
            stats = self._engine.stats

        result = SessionResult(
            path=final_path,
            sensor_available=self._sensor_available,
            stats=stats,
        )
        if transmit and self.channel is not None:
            try:
                self.channel.send(final_path)
                result = replace(result, sent=True)
            except TransportError as exc:
                result = replace(result, error=exc)
            with self._lock:
                self._state = SessionState.IDLE

        self.last_result = result
        return result
