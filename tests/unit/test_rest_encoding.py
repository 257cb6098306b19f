"""Firestore REST value encoding and timestamp parsing."""

from datetime import datetime, timedelta, timezone

import pytest

from app.infrastructure.firebase._rest_encoding import (
    decode_fields,
    encode_fields,
    format_rest_timestamp,
    parse_rest_timestamp,
)


def test_parse_rest_timestamp_truncates_nanoseconds() -> None:
    parsed = parse_rest_timestamp("2024-03-01T10:00:00.123456789Z")
    assert parsed == datetime(2024, 3, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert parse_rest_timestamp("2024-03-01T10:00:00Z").tzinfo == timezone.utc


def test_format_rest_timestamp_converts_to_utc() -> None:
    kampala = timezone(timedelta(hours=3))
    value = datetime(2024, 3, 1, 13, 0, tzinfo=kampala)
    assert format_rest_timestamp(value) == "2024-03-01T10:00:00.000000Z"


def test_encode_fields_value_types() -> None:
    encoded = encode_fields(
        {
            "name": "Camp",
            "capacity": 40,
            "ratio": 0.5,
            "open": True,
            "note": None,
            "statuses": ("pending", "in-progress"),
            "meta": {"level": "Pro"},
        }
    )["fields"]
    assert encoded["name"] == {"stringValue": "Camp"}
    assert encoded["capacity"] == {"integerValue": "40"}
    assert encoded["ratio"] == {"doubleValue": 0.5}
    assert encoded["open"] == {"booleanValue": True}
    assert encoded["note"] == {"nullValue": None}
    assert encoded["statuses"] == {
        "arrayValue": {"values": [{"stringValue": "pending"}, {"stringValue": "in-progress"}]}
    }
    assert encoded["meta"] == {"mapValue": {"fields": {"level": {"stringValue": "Pro"}}}}


def test_encode_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        encode_fields({"bad": object()})


def test_decode_fields_from_document() -> None:
    document = {
        "name": "projects/p/databases/(default)/documents/events/e1",
        "fields": {
            "title": {"stringValue": "Final"},
            "capacity": {"integerValue": "120"},
            "startDate": {"timestampValue": "2024-03-01T10:00:00Z"},
            "tags": {"arrayValue": {}},
            "venue": {"mapValue": {"fields": {"city": {"stringValue": "Gulu"}}}},
        },
    }
    assert decode_fields(document) == {
        "title": "Final",
        "capacity": 120,
        "startDate": datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc),
        "tags": [],
        "venue": {"city": "Gulu"},
    }
    assert decode_fields(None) == {}
