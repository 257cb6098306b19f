"""Program operations: list, get, create, update, delete (delegate to IDocumentStore)."""

from __future__ import annotations

from typing import Any

from app.application.dtos.program import ProgramCreate, ProgramResult, ProgramUpdate
from app.application.dtos.records import ProgramRecord
from app.application.interfaces.document_store import IDocumentStore, collection_query
from app.application.services.decoders import decode_program
from app.core.constants import (
    COLLECTION_PROGRAMS,
    FIELD_CREATED_AT,
    FIELD_UPDATED_AT,
)
from app.domain.exceptions import (
    ResourceNotFoundException,
    StoreOperationException,
    ValidationException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


def _to_result(record: ProgramRecord) -> ProgramResult:
    return ProgramResult(
        id=record.id,
        name=record.name,
        description=record.description,
        status=record.status,
        type=record.type,
        start_date=record.start_date,
        end_date=record.end_date,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _check_dates(start: Any, end: Any) -> None:
    if start is not None and end is not None and end < start:
        raise ValidationException("end_date must not be before start_date", field="end_date")


class ProgramService:
    """CRUD over the programs collection. Store failures surface as StoreOperationException."""

    def __init__(self, store: IDocumentStore) -> None:
        self.store = store

    @traced("programs.list_programs")
    async def list_programs(self) -> list[ProgramResult]:
        """All programs, newest first."""
        try:
            docs = await self.store.fetch_all(
                collection_query(
                    COLLECTION_PROGRAMS, order_by=FIELD_CREATED_AT, descending=True
                )
            )
        except Exception as e:
            logger.exception("Error fetching programs")
            raise StoreOperationException(
                "Failed to fetch programs", collection=COLLECTION_PROGRAMS
            ) from e
        return [_to_result(decode_program(d)) for d in docs]

    @traced("programs.get_program")
    async def get_program(self, program_id: str) -> ProgramResult:
        try:
            doc = await self.store.get(COLLECTION_PROGRAMS, program_id)
        except Exception as e:
            logger.exception("Error fetching program %s", program_id)
            raise StoreOperationException(
                "Failed to fetch program", collection=COLLECTION_PROGRAMS
            ) from e
        if doc is None:
            raise ResourceNotFoundException("program", program_id)
        return _to_result(decode_program(doc))

    @traced("programs.create_program")
    async def create_program(self, data: ProgramCreate) -> ProgramResult:
        """Create a program with a CUID2 id; createdAt and updatedAt are set to now."""
        name = data.name.strip()
        if not name:
            raise ValidationException("Program name is required", field="name")
        _check_dates(data.start_date, data.end_date)

        program_id = generate_cuid()
        now = utc_now()
        fields: dict[str, Any] = {
            "name": name,
            "description": data.description,
            "status": data.status.value,
            "startDate": data.start_date,
            "endDate": data.end_date,
            FIELD_CREATED_AT: now,
            FIELD_UPDATED_AT: now,
        }
        if data.type:
            fields["type"] = data.type
        try:
            await self.store.create(COLLECTION_PROGRAMS, program_id, fields)
        except Exception as e:
            logger.exception("Error creating program")
            raise StoreOperationException(
                "Failed to create program", collection=COLLECTION_PROGRAMS
            ) from e
        logger.info("Created program %s", program_id)
        return ProgramResult(
            id=program_id,
            name=name,
            description=data.description,
            status=data.status.value,
            type=data.type,
            start_date=data.start_date,
            end_date=data.end_date,
            created_at=now,
            updated_at=now,
        )

    @traced("programs.update_program")
    async def update_program(self, program_id: str, data: ProgramUpdate) -> ProgramResult:
        """Apply the non-None fields of data; updatedAt is always refreshed."""
        fields: dict[str, Any] = {}
        if data.name is not None:
            if not data.name.strip():
                raise ValidationException("Program name is required", field="name")
            fields["name"] = data.name.strip()
        if data.description is not None:
            fields["description"] = data.description
        if data.status is not None:
            fields["status"] = data.status.value
        if data.start_date is not None:
            fields["startDate"] = data.start_date
        if data.end_date is not None:
            fields["endDate"] = data.end_date
        if data.type is not None:
            fields["type"] = data.type
        _check_dates(data.start_date, data.end_date)
        fields[FIELD_UPDATED_AT] = utc_now()

        try:
            updated = await self.store.update(COLLECTION_PROGRAMS, program_id, fields)
        except Exception as e:
            logger.exception("Error updating program %s", program_id)
            raise StoreOperationException(
                "Failed to update program", collection=COLLECTION_PROGRAMS
            ) from e
        if not updated:
            raise ResourceNotFoundException("program", program_id)
        return await self.get_program(program_id)

    @traced("programs.delete_program")
    async def delete_program(self, program_id: str) -> None:
        try:
            await self.store.delete(COLLECTION_PROGRAMS, program_id)
        except Exception as e:
            logger.exception("Error deleting program %s", program_id)
            raise StoreOperationException(
                "Failed to delete program", collection=COLLECTION_PROGRAMS
            ) from e
        logger.info("Deleted program %s", program_id)
