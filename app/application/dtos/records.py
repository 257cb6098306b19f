"""Typed domain records decoded from raw store documents.

Produced only by app.application.services.decoders; aggregation code never
reads raw document fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import AthleteLevel


@dataclass(frozen=True)
class UserRecord:
    id: str
    name: str | None
    email: str | None
    status: str
    created_at: datetime | None
    last_active_at: datetime | None

    @property
    def display_name(self) -> str:
        return self.name or self.email or "Unknown user"


@dataclass(frozen=True)
class ProgramRecord:
    id: str
    name: str
    description: str
    status: str
    type: str | None
    start_date: datetime | None
    end_date: datetime | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class EventRecord:
    id: str
    title: str
    location: str
    status: str | None
    start_date: datetime | None
    end_date: datetime | None
    created_at: datetime | None
    capacity: int
    registrations: int


@dataclass(frozen=True)
class AthleteRecord:
    id: str
    first_name: str
    last_name: str
    location: str
    level: AthleteLevel
    status: str | None
    created_at: datetime | None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class SessionRecord:
    """A user app session; duration is in seconds."""

    id: str
    user_id: str | None
    start_time: datetime | None
    end_time: datetime | None
    duration_seconds: int


@dataclass(frozen=True)
class TrainingSessionRecord:
    id: str
    title: str
    status: str | None
    start_date: datetime | None


@dataclass(frozen=True)
class ContactRecord:
    id: str
    name: str
    subject: str
    created_at: datetime | None


@dataclass(frozen=True)
class ChildRecord:
    """A sub-collection document (enrollment, completion) keyed by its parent program."""

    id: str
    parent_id: str | None
