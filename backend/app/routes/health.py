"""
Salon Backend — Health Check Route
====================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Probes the database and reports how the media and email
       collaborators are configured.

Status levels:
    - healthy:   database reachable, media backend and email configured
    - degraded:  database reachable, but uploads or email are unconfigured
                 (creates still succeed; photos or welcome emails will not)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from app import __version__
from app.database import engine
from app.schemas.stylist import HealthResponse
from app.services.email_service import email_service
from app.services.media_service import media_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    media_status = media_service.backend_name
    email_paths = email_service.configured_paths
    if overall == "healthy" and (media_status == "unconfigured" or not email_paths):
        overall = "degraded"

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        media=media_status,
        email=email_paths,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
