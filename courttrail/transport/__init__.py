"""
Trail transport: wire codec and the injected cross-device channel.

Modules:
    codec: encode_path / decode_payload for the {"workoutPath": [...]} format
    channel: TrailChannel interface, LoopbackChannel, TrailReceiver
"""

from courttrail.transport.codec import (
    PATH_KEY,
    END_DATE_KEY,
    encode_path,
    parse_coordinate,
    decode_entry,
    decode_payload,
    encode_json,
    decode_json,
)

from courttrail.transport.channel import (
    TrailChannel,
    LoopbackChannel,
    TrailReceiver,
)

__all__ = [
    "PATH_KEY",
    "END_DATE_KEY",
    "encode_path",
    "parse_coordinate",
    "decode_entry",
    "decode_payload",
    "encode_json",
    "decode_json",
    "TrailChannel",
    "LoopbackChannel",
    "TrailReceiver",
]
