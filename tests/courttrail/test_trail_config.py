"""
Unit tests for courttrail/config.py.

Run with: pytest tests/courttrail/test_trail_config.py -v
"""

import json
import tempfile
import unittest
from pathlib import Path

import pytest

from courttrail.config import TrailConfig, load_config, save_config
from courttrail.heatmap.grid import HeatmapConfig, Rect
from courttrail.sensors.types import PdrConfig


class TestTrailConfig(unittest.TestCase):
    """Test suite for configuration loading and saving."""

    def test_defaults(self) -> None:
        config = TrailConfig.from_dict({})
        assert config.pdr == PdrConfig()
        assert config.heatmap == HeatmapConfig()

    def test_save_load_round_trip(self) -> None:
        config = TrailConfig(
            pdr=PdrConfig(rotation_rate_limit=1.0, step_noise_floor=0.2),
            heatmap=HeatmapConfig(rows=16, cols=29, bounds=Rect.centered(6, 6)),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "config.json"
            save_config(config, path)
            assert path.exists()
            loaded = load_config(path)
        assert loaded == config

    def test_partial_sections(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            path.write_text(json.dumps({"pdr": {"step_source": "accel"}}))
            config = load_config(path)
        assert config.pdr.step_source == "accel"
        assert config.pdr.step_noise_floor == 0.1
        assert config.heatmap.bounds is None

    def test_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("does/not/exist.json")

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            path.write_text("{broken")
            with pytest.raises(ValueError, match="Invalid JSON"):
                load_config(path)

    def test_unknown_section(self) -> None:
        with pytest.raises(ValueError, match="Unknown config sections"):
            TrailConfig.from_dict({"pdr": {}, "logging": {}})

    def test_unknown_field(self) -> None:
        with pytest.raises(ValueError, match="Unknown PdrConfig"):
            TrailConfig.from_dict({"pdr": {"floor": 0.1}})

    def test_not_an_object(self) -> None:
        with pytest.raises(ValueError, match="JSON object"):
            TrailConfig.from_dict([1, 2])

    def test_section_not_an_object(self) -> None:
        with pytest.raises(ValueError, match="'pdr' must be a JSON object"):
            TrailConfig.from_dict({"pdr": None})
        with pytest.raises(ValueError, match="'heatmap' must be a JSON object"):
            TrailConfig.from_dict({"heatmap": [8, 8]})


if __name__ == "__main__":
    unittest.main()
