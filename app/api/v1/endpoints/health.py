"""Health check endpoint. No store dependency; used for liveness probes."""

from fastapi import APIRouter, Request

from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok; store_configured reports whether store-backed routes can answer."""
    store = getattr(request.app.state, "document_store", None)
    return HealthResponse(store_configured=store is not None)
