"""
QuickNotes Backend: Health Check Route
========================================

What:  GET /health for monitoring and load balancer probes.
How:   Runs `SELECT 1` through the note store and reports the result with
       the application version and uptime.

Status levels:
    healthy:   the store answered
    unhealthy: the store did not answer (still HTTP 200 so the payload is
               readable; probes should look at `status`)
"""

import time

from fastapi import APIRouter, Depends

from quicknotes import __version__
from quicknotes.dependencies import get_note_repository
from quicknotes.schemas.note import HealthResponse
from quicknotes.services.note_repository import NoteRepository

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    repository: NoteRepository = Depends(get_note_repository),
) -> HealthResponse:
    connected = await repository.store.ping()
    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
