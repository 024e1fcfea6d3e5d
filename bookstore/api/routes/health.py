"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health-check always returns 200 if process is up (liveness)
    - GET /health-check/ready returns 503 if database is unreachable (readiness)
"""

import logging
from datetime import date

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from bookstore.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health-check", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "success": True,
        "message": "Hello World!",
        "data": date.today().strftime("%a %b %d %Y"),
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        logger.warning("Readiness check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "message": "not_ready",
                "data": {"database": "unavailable"},
            },
        )
    return {
        "success": True,
        "message": "ready",
        "data": {"database": "healthy"},
    }
