"""Timestamp coercion for stored fields and document id generation."""

from app.shared.utils.datetime import (
    ensure_utc,
    from_timestamp_ms_utc,
    parse_timestamp,
    to_local,
    utc_now,
)
from app.shared.utils.generators import generate_cuid

__all__ = [
    "ensure_utc",
    "from_timestamp_ms_utc",
    "generate_cuid",
    "parse_timestamp",
    "to_local",
    "utc_now",
]
