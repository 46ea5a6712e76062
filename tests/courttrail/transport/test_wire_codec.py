"""
Unit tests for courttrail/transport/codec.py.

Tests cover:
    - Encoding order and the optional end date
    - Permissive decoding of numbers and decimal strings
    - Dropping malformed entries
    - Empty-result warnings
    - Encode/decode round trip

Run with: pytest tests/courttrail/transport/test_wire_codec.py -v
"""

import json
import unittest
import warnings
from datetime import datetime, timezone

import numpy as np
import pytest

from courttrail.errors import EmptyPayloadWarning
from courttrail.path import Position
from courttrail.transport.codec import (
    END_DATE_KEY,
    PATH_KEY,
    decode_entry,
    decode_json,
    decode_payload,
    encode_json,
    encode_path,
    parse_coordinate,
)


class TestEncodePath(unittest.TestCase):

    def test_encode_order(self) -> None:
        payload = encode_path([Position(0.0, 0.0), Position(1.5, -2.0), (3, 4)])
        assert payload == {
            PATH_KEY: [
                {"x": 0.0, "y": 0.0},
                {"x": 1.5, "y": -2.0},
                {"x": 3.0, "y": 4.0},
            ]
        }

    def test_end_date(self) -> None:
        end = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        payload = encode_path([Position(0.0, 0.0)], end_time=end)
        assert payload[END_DATE_KEY] == "2024-05-01T12:30:00+00:00"

    def test_json_native_numbers(self) -> None:
        text = encode_json([Position(0.25, 1.0)])
        assert json.loads(text) == {PATH_KEY: [{"x": 0.25, "y": 1.0}]}


class TestParseCoordinate(unittest.TestCase):

    def test_accepted(self) -> None:
        assert parse_coordinate(2) == 2.0
        assert parse_coordinate(-1.25) == -1.25
        assert parse_coordinate("1.5") == 1.5
        assert parse_coordinate(" -3e2 ") == -300.0
        assert parse_coordinate(np.float32(0.5)) == 0.5

    def test_rejected(self) -> None:
        for value in ("bad", "", "1_000", None, True, [1.0], {"v": 1},
                      "nan", "inf", float("nan"), float("-inf")):
            assert parse_coordinate(value) is None, value

    def test_oversized_integer_rejected(self) -> None:
        assert parse_coordinate(10 ** 400) is None
        assert parse_coordinate(-(10 ** 400)) is None
        assert parse_coordinate(10 ** 300) == 1e300


class TestDecodePayload(unittest.TestCase):
    """Test suite for permissive payload decoding."""

    def test_string_and_number_mix(self) -> None:
        payload = {PATH_KEY: [{"x": "1.5", "y": 2}, {"x": "bad", "y": 3}]}
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            points = decode_payload(payload)
        assert points == [Position(1.5, 2.0)]

    def test_entry_missing_coordinate_dropped(self) -> None:
        payload = {PATH_KEY: [{"x": 1}, {"y": 2}, {"x": 0, "y": 0}, "junk", None]}
        assert decode_payload(payload) == [Position(0.0, 0.0)]

    def test_order_preserved(self) -> None:
        entries = [{"x": k, "y": -k} for k in range(10)]
        points = decode_payload({PATH_KEY: entries})
        assert [p.x for p in points] == list(range(10))

    def test_end_date_ignored(self) -> None:
        payload = {PATH_KEY: [{"x": 0, "y": 1}], END_DATE_KEY: "2024-01-01T00:00:00"}
        assert decode_payload(payload) == [Position(0.0, 1.0)]

    def test_all_malformed_warns(self) -> None:
        with pytest.warns(EmptyPayloadWarning, match="no points"):
            points = decode_payload({PATH_KEY: [{"x": "bad", "y": 1}]})
        assert points == []

    def test_empty_list_warns(self) -> None:
        with pytest.warns(EmptyPayloadWarning):
            assert decode_payload({PATH_KEY: []}) == []

    def test_missing_key_warns(self) -> None:
        with pytest.warns(EmptyPayloadWarning, match=PATH_KEY):
            assert decode_payload({"path": []}) == []

    def test_not_a_mapping_warns(self) -> None:
        with pytest.warns(EmptyPayloadWarning, match="mapping"):
            assert decode_payload([1, 2, 3]) == []

    def test_decode_entry(self) -> None:
        assert decode_entry({"x": "0.5", "y": "0.25"}) == Position(0.5, 0.25)
        assert decode_entry({"x": 1}) is None
        assert decode_entry(3) is None


class TestJsonRoundTrip(unittest.TestCase):

    def test_round_trip(self) -> None:
        rng = np.random.default_rng(11)
        path = [Position(float(x), float(y)) for x, y in rng.uniform(-50, 50, (200, 2))]
        decoded = decode_json(encode_json(path))
        assert len(decoded) == len(path)
        np.testing.assert_allclose(np.array(decoded), np.array(path), atol=1e-9)

    def test_invalid_json_warns(self) -> None:
        with pytest.warns(EmptyPayloadWarning, match="JSON"):
            assert decode_json("{not json") == []

    def test_oversized_integer_entry_dropped(self) -> None:
        text = '{"workoutPath": [{"x": 1' + '0' * 400 + ', "y": 1}, {"x": 1, "y": 2}]}'
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            points = decode_json(text)
        assert points == [Position(1.0, 2.0)]


if __name__ == "__main__":
    unittest.main()
