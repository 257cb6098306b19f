"""Program API: thin routes delegating to ProgramService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import get_program_service
from app.application.dtos.program import ProgramCreate, ProgramUpdate
from app.application.use_cases.programs import ProgramService
from app.core.limiter import limit_writes
from app.schemas.program import (
    ProgramCreateRequest,
    ProgramResponse,
    ProgramUpdateRequest,
)

router = APIRouter()

ServiceDep = Annotated[ProgramService, Depends(get_program_service)]


@router.get("", response_model=list[ProgramResponse])
async def list_programs(service: ServiceDep):
    """All programs, newest first."""
    return await service.list_programs()


@router.post("", response_model=ProgramResponse, status_code=201)
@limit_writes
async def create_program(
    request: Request,
    body: ProgramCreateRequest,
    service: ServiceDep,
):
    return await service.create_program(
        ProgramCreate(
            name=body.name,
            description=body.description,
            status=body.status,
            start_date=body.start_date,
            end_date=body.end_date,
            type=body.type,
        )
    )


@router.get("/{program_id}", response_model=ProgramResponse)
async def get_program(program_id: str, service: ServiceDep):
    return await service.get_program(program_id)


@router.patch("/{program_id}", response_model=ProgramResponse)
@limit_writes
async def update_program(
    request: Request,
    program_id: str,
    body: ProgramUpdateRequest,
    service: ServiceDep,
):
    """Partial update; omitted fields are left unchanged."""
    return await service.update_program(
        program_id, ProgramUpdate(**body.model_dump(exclude_unset=True))
    )


@router.delete("/{program_id}", status_code=204)
@limit_writes
async def delete_program(request: Request, program_id: str, service: ServiceDep):
    await service.delete_program(program_id)
    return Response(status_code=204)
