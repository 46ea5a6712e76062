"""
Unit tests for courttrail/sensors/types.py.

Tests cover:
    - CalibrationFrame normalization and unit handling
    - MotionSample validation and (de)serialization
    - PdrConfig validation

Run with: pytest tests/courttrail/sensors/test_sensor_types.py -v
"""

import math
import unittest

import numpy as np
import pytest

from courttrail.sensors.types import (
    STEP_NOISE_FLOOR,
    CalibrationFrame,
    MotionSample,
    PdrConfig,
)


class TestCalibrationFrame(unittest.TestCase):
    """Test suite for the reference heading."""

    def test_heading_normalized(self) -> None:
        frame = CalibrationFrame(2 * math.pi + 0.25)
        assert frame.reference_heading == pytest.approx(0.25)

    def test_from_degrees(self) -> None:
        frame = CalibrationFrame.from_degrees(270.0)
        assert frame.reference_heading == pytest.approx(-math.pi / 2)
        assert frame.reference_heading_deg == pytest.approx(-90.0)

    def test_from_radians(self) -> None:
        assert CalibrationFrame.from_radians(0.5).reference_heading == pytest.approx(0.5)

    def test_non_finite_rejected(self) -> None:
        with pytest.raises(ValueError, match="finite"):
            CalibrationFrame(float("nan"))

    def test_non_numeric_rejected(self) -> None:
        with pytest.raises(TypeError):
            CalibrationFrame("north")
        with pytest.raises(TypeError):
            CalibrationFrame(True)

    def test_immutable(self) -> None:
        frame = CalibrationFrame(0.0)
        with pytest.raises(AttributeError):
            frame.reference_heading = 1.0


class TestMotionSample(unittest.TestCase):
    """Test suite for motion sample packets."""

    def test_empty_sample(self) -> None:
        sample = MotionSample()
        assert not sample.has_yaw
        assert not sample.has_distance
        assert not sample.has_device_motion

    def test_field_flags(self) -> None:
        assert MotionSample(yaw=0.1).has_device_motion
        assert MotionSample(rotation_rate=[0.0, 0.0, 1.0]).has_device_motion
        assert MotionSample(cumulative_distance=2.0).has_distance
        assert not MotionSample(cumulative_distance=2.0).has_device_motion

    def test_vectors_read_only(self) -> None:
        sample = MotionSample(linear_acceleration=[0.1, 0.2, 0.3])
        assert sample.linear_acceleration.dtype == float
        with pytest.raises(ValueError):
            sample.linear_acceleration[0] = 1.0

    def test_vector_shape_checked(self) -> None:
        with pytest.raises(ValueError, match="shape"):
            MotionSample(rotation_rate=[0.0, 1.0])

    def test_non_finite_rejected(self) -> None:
        with pytest.raises(ValueError, match="finite"):
            MotionSample(yaw=float("inf"))
        with pytest.raises(ValueError, match="finite"):
            MotionSample(linear_acceleration=[0.0, np.nan, 0.0])

    def test_bool_rejected(self) -> None:
        with pytest.raises(TypeError):
            MotionSample(cumulative_distance=True)

    def test_dict_round_trip(self) -> None:
        sample = MotionSample(
            yaw=0.3,
            rotation_rate=[0.0, 0.1, 0.2],
            cumulative_distance=4.5,
            t=1.25,
        )
        data = sample.to_dict()
        assert "linear_acceleration" not in data
        restored = MotionSample.from_dict(data)
        assert restored.yaw == sample.yaw
        assert restored.cumulative_distance == sample.cumulative_distance
        assert restored.t == sample.t
        np.testing.assert_array_equal(restored.rotation_rate, sample.rotation_rate)

    def test_from_dict_unknown_field(self) -> None:
        with pytest.raises(ValueError, match="Unknown"):
            MotionSample.from_dict({"yaw": 0.0, "pitch": 0.1})


class TestPdrConfig(unittest.TestCase):
    """Test suite for engine parameters."""

    def test_defaults(self) -> None:
        config = PdrConfig()
        assert config.step_noise_floor == STEP_NOISE_FLOOR == 0.1
        assert config.rotation_rate_limit is None
        assert config.step_source == 'distance'

    def test_invalid_values(self) -> None:
        with pytest.raises(ValueError, match="step_noise_floor"):
            PdrConfig(step_noise_floor=-0.1)
        with pytest.raises(ValueError, match="rotation_rate_limit"):
            PdrConfig(rotation_rate_limit=0.0)
        with pytest.raises(ValueError, match="step_source"):
            PdrConfig(step_source='gps')
        with pytest.raises(ValueError, match="step_length"):
            PdrConfig(step_length=0.0)
        with pytest.raises(ValueError, match="accel_threshold"):
            PdrConfig(accel_threshold_high=0.1, accel_threshold_low=0.2)

    def test_dict_round_trip(self) -> None:
        config = PdrConfig(rotation_rate_limit=1.0, step_source='accel')
        assert PdrConfig.from_dict(config.to_dict()) == config

    def test_from_dict_unknown_field(self) -> None:
        with pytest.raises(ValueError, match="Unknown"):
            PdrConfig.from_dict({"noise_floor": 0.2})


if __name__ == "__main__":
    unittest.main()
