"""Court trail reconstruction from wearable motion sensors.

This package contains the components of the court trail pipeline:
- sensors: Calibration, motion samples and pedestrian dead reckoning (PDR)
- path: Append-only trail store in the court frame
- session: Calibrate / record / hand-off state machine
- transport: Wire codec and cross-device channel interface
- heatmap: Binning of trail points into an intensity grid
- eval: Trail summaries and offline figures

Data flow:
    calibration -> DeadReckoningEngine <- motion samples
                -> PathStore -> encode_path -> (remote) decode_payload
                -> bin_points -> Grid -> external renderer

Note: courttrail.eval imports matplotlib and is not imported here.
"""

from courttrail.errors import (
    PreconditionViolation,
    TransportError,
    SensorUnavailableWarning,
    EmptyPayloadWarning,
)
from courttrail.path import ORIGIN, PathStore, Position
from courttrail.sensors import (
    CalibrationFrame,
    MotionSample,
    PdrConfig,
    DeadReckoningEngine,
    ReplaySampleSource,
)
from courttrail.session import SessionResult, SessionState, TrailSession
from courttrail.transport import (
    LoopbackChannel,
    TrailReceiver,
    decode_payload,
    encode_path,
)
from courttrail.heatmap import Grid, HeatmapConfig, Rect, bin_points
from courttrail.config import TrailConfig, load_config, save_config

__all__ = [
    "PreconditionViolation",
    "TransportError",
    "SensorUnavailableWarning",
    "EmptyPayloadWarning",
    "ORIGIN",
    "PathStore",
    "Position",
    "CalibrationFrame",
    "MotionSample",
    "PdrConfig",
    "DeadReckoningEngine",
    "ReplaySampleSource",
    "SessionResult",
    "SessionState",
    "TrailSession",
    "LoopbackChannel",
    "TrailReceiver",
    "decode_payload",
    "encode_path",
    "Grid",
    "HeatmapConfig",
    "Rect",
    "bin_points",
    "TrailConfig",
    "load_config",
    "save_config",
]

__version__ = "0.1.0"
