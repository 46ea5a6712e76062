"""
Wire codec for trails exchanged between the wearable and the phone.

Payload format (no version field):

    {"workoutPath": [{"x": <number|string>, "y": <number|string>}, ...],
     "workoutEndDate": "<ISO-8601>"}          # optional, never required

Encoding always writes native numbers in path order. Decoding is
permissive: each coordinate may be a number or a decimal string (older
senders stringified them). An entry whose x or y is absent, unparseable or
non-finite is dropped silently. A payload that yields no points at all
emits an EmptyPayloadWarning and decodes to an empty list, so nothing is
published downstream.
"""

import json
import math
import warnings
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from courttrail.errors import EmptyPayloadWarning
from courttrail.path import Position

PATH_KEY = "workoutPath"
END_DATE_KEY = "workoutEndDate"


def encode_path(
    path: Sequence[Sequence[float]],
    end_time: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Encode a path as a wire payload.

    Args:
        path: Ordered court-frame positions.
        end_time: Optional session end time, added as "workoutEndDate".

    Returns:
        JSON-compatible payload dict.

    Example:
        >>> encode_path([Position(0.0, 0.0), Position(0.0, 1.0)])
        {'workoutPath': [{'x': 0.0, 'y': 0.0}, {'x': 0.0, 'y': 1.0}]}
    """
    payload: Dict[str, Any] = {
        PATH_KEY: [{"x": float(p[0]), "y": float(p[1])} for p in path]
    }
    if end_time is not None:
        payload[END_DATE_KEY] = end_time.isoformat()
    return payload


def parse_coordinate(value: Any) -> Optional[float]:
    """
    Convert one wire coordinate to float, or None if it is unusable.

    Accepts ints, floats (including numpy scalars) and decimal strings.
    Booleans, other types, NaN, infinities and integers too large for a
    float are rejected.

    Example:
        >>> parse_coordinate("1.5"), parse_coordinate(2), parse_coordinate("bad")
        (1.5, 2.0, None)
    """
    if isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        # float() also accepts digit-group underscores, which no sender emits
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def decode_entry(entry: Any) -> Optional[Position]:
    """Decode one {"x", "y"} entry, or None if it must be dropped."""
    if not isinstance(entry, Mapping):
        return None
    x = parse_coordinate(entry.get("x"))
    y = parse_coordinate(entry.get("y"))
    if x is None or y is None:
        return None
    return Position(x, y)


def decode_payload(payload: Any) -> List[Position]:
    """
    Decode a wire payload into an ordered list of positions.

    Args:
        payload: Received message (normally a dict).

    Returns:
        Decoded positions in wire order. Empty if nothing usable was found,
        in which case an EmptyPayloadWarning has been emitted.

    Example:
        >>> decode_payload({"workoutPath": [{"x": "1.5", "y": 2},
        ...                                 {"x": "bad", "y": 3}]})
        [Position(x=1.5, y=2.0)]
    """
    if not isinstance(payload, Mapping):
        warnings.warn(
            f"Payload must be a mapping, got {type(payload).__name__}; "
            f"nothing published",
            EmptyPayloadWarning,
            stacklevel=2,
        )
        return []

    entries = payload.get(PATH_KEY)
    if not isinstance(entries, (list, tuple)):
        warnings.warn(
            f"Payload key '{PATH_KEY}' missing or not a list; nothing published",
            EmptyPayloadWarning,
            stacklevel=2,
        )
        return []

    points = []
    for entry in entries:
        position = decode_entry(entry)
        if position is not None:
            points.append(position)

    if not points:
        warnings.warn(
            f"Payload with {len(entries)} entries decoded to no points; "
            f"nothing published",
            EmptyPayloadWarning,
            stacklevel=2,
        )
    return points


def encode_json(path: Sequence[Sequence[float]], end_time: Optional[datetime] = None) -> str:
    """Encode a path straight to a JSON string."""
    return json.dumps(encode_path(path, end_time=end_time))


def decode_json(text: str) -> List[Position]:
    """
    Decode a JSON string payload.

    Text that is not valid JSON is treated like any other unusable payload.
    """
    try:
        payload = json.loads(text)
    except (TypeError, ValueError):
        warnings.warn(
            "Payload is not valid JSON; nothing published",
            EmptyPayloadWarning,
            stacklevel=2,
        )
        return []
    return decode_payload(payload)
