"""Program DTOs for CRUD use cases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import ProgramStatus


@dataclass
class ProgramCreate:
    name: str
    description: str
    status: ProgramStatus
    start_date: datetime | None = None
    end_date: datetime | None = None
    type: str | None = None


@dataclass
class ProgramUpdate:
    """Partial update; None means leave the field unchanged."""

    name: str | None = None
    description: str | None = None
    status: ProgramStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    type: str | None = None


@dataclass
class ProgramResult:
    id: str
    name: str
    description: str
    status: str
    type: str | None
    start_date: datetime | None
    end_date: datetime | None
    created_at: datetime | None
    updated_at: datetime | None
