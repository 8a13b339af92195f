"""
HotOrNot Backend — Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the database with SELECT 1 and reports uptime.

    Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from hotornot import __version__
from hotornot.database import Database, get_database
from hotornot.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(database: Database = Depends(get_database)):
    connected = await database.ping()
    health = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not connected:
        logger.warning("Health check: database unreachable")
        return JSONResponse(status_code=503, content=health.model_dump())
    return health
