"""
Configuration for court trail sessions.

A configuration bundles the PDR parameters and the heatmap binning
parameters. On disk it is a JSON file:

    {
      "pdr": {"step_noise_floor": 0.1, "rotation_rate_limit": 1.0, ...},
      "heatmap": {"rows": 16, "cols": 29,
                  "bounds": {"min_x": -6, "min_y": -6, "max_x": 6, "max_y": 6}}
    }

Both sections are optional; missing fields take their dataclass defaults.
Unknown keys are rejected so that typos do not silently fall back to
defaults.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

from courttrail.heatmap.grid import HeatmapConfig
from courttrail.sensors.types import PdrConfig


@dataclass(frozen=True)
class TrailConfig:
    """Top-level configuration: PDR engine plus heatmap binning."""

    pdr: PdrConfig = field(default_factory=PdrConfig)
    heatmap: HeatmapConfig = field(default_factory=HeatmapConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {'pdr': self.pdr.to_dict(), 'heatmap': self.heatmap.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrailConfig":
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a JSON object, got {type(data).__name__}")
        unknown = set(data) - {'pdr', 'heatmap'}
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")
        for name in ('pdr', 'heatmap'):
            if not isinstance(data.get(name, {}), dict):
                raise ValueError(
                    f"Config section '{name}' must be a JSON object, "
                    f"got {type(data[name]).__name__}"
                )
        return cls(
            pdr=PdrConfig.from_dict(data.get('pdr', {})),
            heatmap=HeatmapConfig.from_dict(data.get('heatmap', {})),
        )


def load_config(path: Union[str, Path]) -> TrailConfig:
    """
    Load a TrailConfig from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the JSON is invalid or contains unknown keys.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    return TrailConfig.from_dict(data)


def save_config(config: TrailConfig, path: Union[str, Path]) -> None:
    """Write a TrailConfig as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
