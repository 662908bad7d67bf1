"""
Notes Service — Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the store handle and reports the aggregate status.

Status levels:
    - healthy:   store reachable (HTTP 200)
    - unhealthy: store unreachable (HTTP 503)

Not part of the contract table and not traced.
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from notes_service import __version__
from notes_service.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    """Probe the store and return HealthResponse."""
    db_status = "connected"
    overall = "healthy"

    try:
        await request.app.state.database.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=body.model_dump(),
    )
