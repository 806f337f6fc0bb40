"""
SimHub Backend — Health Check Route
===================================

What:  Liveness/readiness probe for Docker and load balancers.
How:   With STORAGE_BACKEND=database, runs SELECT 1 on the engine; the service
       is unhealthy (HTTP 503) when the database is unreachable. With the
       memory backend there is nothing external to probe.
"""

import logging
import time

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from simhub import __version__
from simhub.config import settings
from simhub.database import engine
from simhub.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def check_database() -> str:
    if settings.storage_backend != "database":
        return "not_used"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check: database unreachable: %s", e)
        return "disconnected"
    return "connected"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    database = await check_database()
    healthy = database != "disconnected"
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        database=database,
        storage_backend=settings.storage_backend,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
