"""System health endpoint for client polling."""

from typing import Any

from fastapi import APIRouter, Depends

from ...api.dependencies import get_agenda_service, get_settings
from ...config import Settings
from ...domain.agenda import AgendaService

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/healthz")
def healthcheck(
    settings: Settings = Depends(get_settings),
    service: AgendaService = Depends(get_agenda_service),
) -> dict[str, Any]:
    """Return coarse-grained backend readiness information."""

    return {
        "status": "ok",
        "environment": settings.environment,
        "entryStore": service.store_backend,
    }
