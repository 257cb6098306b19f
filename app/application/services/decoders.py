"""Decode raw store documents into typed records.

One decoder per entity; every defaulting rule for missing or malformed
fields lives here so aggregation code can rely on typed values.
"""

from __future__ import annotations

from typing import Any

from app.application.dtos.records import (
    AthleteRecord,
    ChildRecord,
    ContactRecord,
    EventRecord,
    ProgramRecord,
    SessionRecord,
    TrainingSessionRecord,
    UserRecord,
)
from app.application.interfaces.document_store import StoredDocument
from app.domain.enums import AthleteLevel, ProgramStatus, UserStatus
from app.shared.utils.datetime import parse_timestamp

UNKNOWN_REGION = "Unknown"
UNNAMED_PROGRAM = "Unnamed Program"


def _str(value: Any) -> str | None:
    """Non-empty, stripped string or None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _int(value: Any) -> int:
    """Non-negative int from int/float/numeric string; 0 otherwise."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    if isinstance(value, str):
        try:
            return max(int(float(value)), 0)
        except ValueError:
            return 0
    return 0


def decode_user(doc: StoredDocument) -> UserRecord:
    f = doc.fields
    return UserRecord(
        id=doc.id,
        name=_str(f.get("name")),
        email=_str(f.get("email")),
        status=_str(f.get("status")) or UserStatus.ACTIVE.value,
        created_at=parse_timestamp(f.get("createdAt")),
        last_active_at=parse_timestamp(f.get("lastActiveAt")),
    )


def decode_program(doc: StoredDocument) -> ProgramRecord:
    """Programs written by older screens use 'title' instead of 'name'."""
    f = doc.fields
    return ProgramRecord(
        id=doc.id,
        name=_str(f.get("name")) or _str(f.get("title")) or UNNAMED_PROGRAM,
        description=_str(f.get("description")) or "",
        status=_str(f.get("status")) or ProgramStatus.DRAFT.value,
        type=_str(f.get("type")),
        start_date=parse_timestamp(f.get("startDate")),
        end_date=parse_timestamp(f.get("endDate")),
        created_at=parse_timestamp(f.get("createdAt")),
        updated_at=parse_timestamp(f.get("updatedAt")),
    )


def decode_event(doc: StoredDocument) -> EventRecord:
    f = doc.fields
    return EventRecord(
        id=doc.id,
        title=_str(f.get("title")) or _str(f.get("name")) or "Untitled event",
        location=_str(f.get("location")) or UNKNOWN_REGION,
        status=_str(f.get("status")),
        start_date=parse_timestamp(f.get("startDate")),
        end_date=parse_timestamp(f.get("endDate")),
        created_at=parse_timestamp(f.get("createdAt")),
        capacity=_int(f.get("capacity")),
        registrations=_int(f.get("registrations")),
    )


def decode_athlete(doc: StoredDocument) -> AthleteRecord:
    f = doc.fields
    return AthleteRecord(
        id=doc.id,
        first_name=_str(f.get("firstName")) or "",
        last_name=_str(f.get("lastName")) or "",
        location=_str(f.get("location")) or UNKNOWN_REGION,
        level=AthleteLevel.parse(f.get("level")),
        status=_str(f.get("status")),
        created_at=parse_timestamp(f.get("createdAt")),
    )


def decode_session(doc: StoredDocument) -> SessionRecord:
    f = doc.fields
    return SessionRecord(
        id=doc.id,
        user_id=_str(f.get("userId")),
        start_time=parse_timestamp(f.get("startTime")),
        end_time=parse_timestamp(f.get("endTime")),
        duration_seconds=_int(f.get("duration")),
    )


def decode_training_session(doc: StoredDocument) -> TrainingSessionRecord:
    f = doc.fields
    return TrainingSessionRecord(
        id=doc.id,
        title=_str(f.get("title")) or "Untitled",
        status=_str(f.get("status")),
        start_date=parse_timestamp(f.get("startDate")),
    )


def decode_contact(doc: StoredDocument) -> ContactRecord:
    f = doc.fields
    return ContactRecord(
        id=doc.id,
        name=_str(f.get("name")) or "Anonymous",
        subject=_str(f.get("subject")) or "No subject",
        created_at=parse_timestamp(f.get("createdAt")),
    )


def decode_child(doc: StoredDocument) -> ChildRecord:
    """Enrollment/completion: the parent program is the owning document.

    A legacy top-level document may carry a 'programId' or 'program' field
    instead. Documents with neither resolve to None and are not counted.
    """
    f = doc.fields
    parent_id = doc.parent_id or _str(f.get("programId")) or _str(f.get("program"))
    return ChildRecord(id=doc.id, parent_id=parent_id)
