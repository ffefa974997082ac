"""
PeerReview Backend — Health Check Route
=========================================

What:  GET /api/health for monitoring and load balancer probes.
How:   Runs `SELECT 1` against the engine. The endpoint always answers 200;
       `status` turns DEGRADED when the database cannot be reached.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text

from peerreview import __version__
from peerreview.database import engine
from peerreview.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "Connected"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "Disconnected"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status="OK" if db_status == "Connected" else "DEGRADED",
        database=db_status,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
    )
