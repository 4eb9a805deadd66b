"""Health check endpoint for liveness probes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.dependencies import get_storage_backend_name
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def healthz(
    storage_backend: Annotated[str, Depends(get_storage_backend_name)],
) -> HealthResponse:
    """Report that the service is up and which storage backend it publishes to.

    Does not touch storage: buckets and projects are only known per event.
    """
    return HealthResponse(status="ok", storage_backend=storage_backend)
