"""
Unit tests for courttrail/sensors/source.py.

Tests cover:
    - Subscription handles (idempotent, stop delivery once cancelled)
    - Kind classification of samples
    - Replay source availability and delivery

Run with: pytest tests/courttrail/sensors/test_sample_source.py -v
"""

import unittest

import pytest

from courttrail.sensors.source import (
    ReplaySampleSource,
    SubscriptionHandle,
    classify_sample,
)
from courttrail.sensors.types import DEVICE_MOTION, PEDOMETER, MotionSample


class TestSubscriptionHandle(unittest.TestCase):

    def test_cancel_idempotent(self) -> None:
        calls = []
        handle = SubscriptionHandle(lambda: calls.append(1))
        assert not handle.cancelled
        handle.cancel()
        handle.cancel()
        assert handle.cancelled
        assert calls == [1]


class TestClassifySample(unittest.TestCase):

    def test_kinds(self) -> None:
        assert classify_sample(MotionSample(yaw=0.0)) == (DEVICE_MOTION,)
        assert classify_sample(MotionSample(cumulative_distance=1.0)) == (PEDOMETER,)
        assert classify_sample(
            MotionSample(yaw=0.0, cumulative_distance=1.0)
        ) == (DEVICE_MOTION, PEDOMETER)
        assert classify_sample(MotionSample()) == ()


class TestReplaySampleSource(unittest.TestCase):
    """Test suite for the in-memory replay source."""

    def setUp(self) -> None:
        self.samples = [
            MotionSample(yaw=0.1),
            MotionSample(cumulative_distance=1.0),
            MotionSample(yaw=0.2, cumulative_distance=2.0),
        ]

    def test_delivery_per_kind(self) -> None:
        source = ReplaySampleSource(self.samples)
        motion, pedometer = [], []
        source.subscribe(DEVICE_MOTION, motion.append)
        source.subscribe(PEDOMETER, pedometer.append)

        delivered = source.replay()

        assert delivered == 4
        assert [s.yaw for s in motion] == [0.1, 0.2]
        assert [s.cumulative_distance for s in pedometer] == [1.0, 2.0]

    def test_cancelled_handler_not_called(self) -> None:
        source = ReplaySampleSource(self.samples)
        seen = []
        handle = source.subscribe(PEDOMETER, seen.append)
        source.push(self.samples[1])
        handle.cancel()
        source.push(self.samples[2])

        assert len(seen) == 1
        assert source.subscriber_count(PEDOMETER) == 0

    def test_subscriber_count(self) -> None:
        source = ReplaySampleSource()
        source.subscribe(DEVICE_MOTION, lambda s: None)
        source.subscribe(PEDOMETER, lambda s: None)
        assert source.subscriber_count() == 2
        assert source.subscriber_count(DEVICE_MOTION) == 1

    def test_unavailable_kind(self) -> None:
        source = ReplaySampleSource(available=[DEVICE_MOTION])
        assert source.is_available(DEVICE_MOTION)
        assert not source.is_available(PEDOMETER)
        with pytest.raises(RuntimeError, match="not available"):
            source.subscribe(PEDOMETER, lambda s: None)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="Unknown"):
            ReplaySampleSource(available=["gps"])
        with pytest.raises(ValueError, match="Unknown"):
            ReplaySampleSource().subscribe("gps", lambda s: None)


if __name__ == "__main__":
    unittest.main()
