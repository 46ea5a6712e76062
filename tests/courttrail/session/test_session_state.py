"""
Unit tests for courttrail/session/state.py (session state machine).

Tests cover:
    - Legal and illegal transitions
    - Stop with zero samples (single-point path)
    - Hand-off through the channel, success and failure
    - Cancellation, reset and late samples
    - Missing motion capability

Run with: pytest tests/courttrail/session/test_session_state.py -v
"""

import math
import unittest
from typing import List, Sequence

import pytest

from courttrail.errors import (
    PreconditionViolation,
    SensorUnavailableWarning,
    TransportError,
)
from courttrail.path import ORIGIN, Position
from courttrail.sensors.source import ReplaySampleSource
from courttrail.sensors.types import (
    DEVICE_MOTION,
    PEDOMETER,
    MotionSample,
    PdrConfig,
)
from courttrail.session.state import (
    SessionState,
    TrailSession,
    required_kinds,
)
from courttrail.transport.channel import LoopbackChannel


class FailingChannel(LoopbackChannel):
    """Channel whose link is never reachable."""

    def send(self, path: Sequence[Position]) -> None:
        raise TransportError("peer not reachable")


class RecordingChannel(LoopbackChannel):

    def __init__(self):
        super().__init__(stamp_end_time=False)
        self.paths: List[Sequence[Position]] = []
        self.activate()

    def send(self, path: Sequence[Position]) -> None:
        self.paths.append(path)
        super().send(path)


class TestSessionTransitions(unittest.TestCase):
    """Test suite for the state machine preconditions."""

    def setUp(self) -> None:
        self.source = ReplaySampleSource()
        self.session = TrailSession(self.source)

    def test_initial_state(self) -> None:
        assert self.session.state is SessionState.IDLE
        assert self.session.calibration is None
        assert self.session.engine is None

    def test_start_requires_calibration(self) -> None:
        with pytest.raises(PreconditionViolation, match="start"):
            self.session.start()
        assert self.session.state is SessionState.IDLE

    def test_stop_requires_active(self) -> None:
        with pytest.raises(PreconditionViolation):
            self.session.stop()
        self.session.calibrate(0.0)
        with pytest.raises(PreconditionViolation):
            self.session.stop()
        assert self.session.state is SessionState.CALIBRATED

    def test_recalibrate_overwrites(self) -> None:
        self.session.calibrate(0.0)
        frame = self.session.calibrate(90.0, degrees=True)
        assert self.session.state is SessionState.CALIBRATED
        assert self.session.calibration == frame
        assert frame.reference_heading == pytest.approx(math.pi / 2)

    def test_calibrate_rejected_while_active(self) -> None:
        self.session.calibrate(0.0)
        self.session.start()
        with pytest.raises(PreconditionViolation, match="calibrate"):
            self.session.calibrate(1.0)
        assert self.session.state is SessionState.ACTIVE
        assert self.session.calibration.reference_heading == 0.0

    def test_start_twice_rejected(self) -> None:
        self.session.calibrate(0.0)
        self.session.start()
        with pytest.raises(PreconditionViolation):
            self.session.start()

    def test_reset_requires_ended(self) -> None:
        with pytest.raises(PreconditionViolation, match="reset"):
            self.session.reset()

    def test_precondition_is_runtime_error(self) -> None:
        assert issubclass(PreconditionViolation, RuntimeError)


class TestSessionRecording(unittest.TestCase):
    """Test suite for recording and hand-off."""

    def setUp(self) -> None:
        self.samples = [
            MotionSample(yaw=0.0),
            MotionSample(cumulative_distance=0.05),
            MotionSample(cumulative_distance=1.0),
            MotionSample(cumulative_distance=2.0),
        ]
        self.source = ReplaySampleSource(self.samples)
        self.channel = RecordingChannel()
        self.session = TrailSession(self.source, channel=self.channel)

    def test_stop_with_zero_samples(self) -> None:
        """Stopping right after start sends the origin-only path."""
        self.session.calibrate(0.0)
        self.session.start()
        assert self.session.path.snapshot() == (ORIGIN,)

        result = self.session.stop()

        assert result.path == (ORIGIN,)
        assert result.sent
        assert self.channel.paths == [(ORIGIN,)]

    def test_full_session(self) -> None:
        received = []
        self.channel.on_receive(received.append)

        self.session.calibrate(0.0)
        self.session.start()
        assert self.source.subscriber_count() == 2
        self.source.replay()
        result = self.session.stop()

        assert result.path == (ORIGIN, Position(0.0, 1.0), Position(0.0, 2.0))
        assert result.sent
        assert result.error is None
        assert result.stats.positions == 2
        assert result.stats.noise_rejected == 1
        assert self.session.state is SessionState.IDLE
        assert self.session.last_result is result
        assert received[0]["workoutPath"] == [
            {"x": 0.0, "y": 0.0}, {"x": 0.0, "y": 1.0}, {"x": 0.0, "y": 2.0}
        ]

    def test_stop_unsubscribes_before_final(self) -> None:
        self.session.calibrate(0.0)
        self.session.start()
        self.session.stop()
        assert self.source.subscriber_count() == 0

    def test_late_sample_does_not_mutate(self) -> None:
        self.session.calibrate(0.0)
        self.session.start()
        engine = self.session.engine
        result = self.session.stop()

        # A sample already in flight when stop() ran
        assert engine.on_pedometer(MotionSample(cumulative_distance=5.0)) is None
        assert self.source.push(MotionSample(cumulative_distance=6.0)) == 0
        assert self.session.path.snapshot() == result.path == (ORIGIN,)

    def test_new_session_resets_path(self) -> None:
        self.session.calibrate(0.0)
        self.session.start()
        self.source.replay()
        self.session.stop()

        self.session.calibrate(0.0)
        self.session.start()
        assert self.session.path.snapshot() == (ORIGIN,)
        assert not self.session.path.frozen

    def test_transport_failure_captured(self) -> None:
        session = TrailSession(self.source, channel=FailingChannel())
        session.calibrate(0.0)
        session.start()
        self.source.replay()
        result = session.stop()

        assert not result.sent
        assert isinstance(result.error, TransportError)
        assert len(result.path) == 3
        assert session.state is SessionState.IDLE

    def test_inactive_channel_fails(self) -> None:
        session = TrailSession(self.source, channel=LoopbackChannel())
        session.calibrate(0.0)
        session.start()
        result = session.stop()
        assert not result.sent
        assert "not active" in str(result.error)

    def test_cancel_keeps_path_and_skips_send(self) -> None:
        self.session.calibrate(0.0)
        self.session.start()
        self.source.replay()
        result = self.session.cancel()

        assert len(result.path) == 3
        assert not result.sent
        assert self.channel.paths == []
        assert self.session.state is SessionState.ENDED

        with pytest.raises(PreconditionViolation):
            self.session.calibrate(0.0)
        self.session.reset()
        assert self.session.state is SessionState.IDLE

    def test_stop_without_channel_stays_ended(self) -> None:
        session = TrailSession(self.source)
        session.calibrate(0.0)
        session.start()
        result = session.stop()
        assert not result.sent
        assert result.error is None
        assert session.state is SessionState.ENDED


class TestSessionSensorUnavailable(unittest.TestCase):
    """Test suite for a device without motion capability."""

    def test_degraded_session(self) -> None:
        source = ReplaySampleSource(
            [MotionSample(yaw=0.0, cumulative_distance=3.0)], available=[DEVICE_MOTION]
        )
        channel = RecordingChannel()
        session = TrailSession(source, channel=channel)
        session.calibrate(0.0)

        with pytest.warns(SensorUnavailableWarning, match="pedometer"):
            session.start()

        assert session.state is SessionState.ACTIVE
        assert not session.sensor_available
        assert source.replay() == 0

        result = session.stop()
        assert result.path == (ORIGIN,)
        assert not result.sensor_available
        assert result.sent

    def test_accel_source_needs_device_motion_only(self) -> None:
        assert required_kinds(PdrConfig(step_source='accel')) == (DEVICE_MOTION,)
        assert required_kinds(PdrConfig()) == (DEVICE_MOTION, PEDOMETER)

        source = ReplaySampleSource(available=[DEVICE_MOTION])
        session = TrailSession(source, config=PdrConfig(step_source='accel'))
        session.calibrate(0.0)
        session.start()
        assert session.sensor_available
        assert source.subscriber_count(DEVICE_MOTION) == 1


if __name__ == "__main__":
    unittest.main()
