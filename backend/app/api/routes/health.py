"""Health & Readiness Probes — liveness, readiness and detailed dependency checks.

Invariants:
    - GET /api/v1/health/ and /api/health always return 200 if the process is up (liveness)
    - GET /api/v1/health/ready returns 503 if the database is unreachable (readiness)
    - GET /api/health/detailed returns 503 if any dependency check is unhealthy

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      the load balancer (ADR: production readiness)
    - db_manager read through the module at call time: it is created in lifespan
"""

import logging
import resource
import sys
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.infrastructure import database
from app.infrastructure.gemini_client import ResilientGeminiClient, get_gemini
from app.infrastructure.socket_manager import SocketManager, get_socket_manager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])
api_health = APIRouter(prefix="/api/health", tags=["health"])

STARTED_AT = time.monotonic()
MEMORY_LIMIT_MB = 1024


def uptime_seconds() -> float:
    return round(time.monotonic() - STARTED_AT, 2)


def rss_megabytes() -> float:
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is bytes on macOS, kilobytes elsewhere
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return round(peak / divisor, 1)


async def database_ok() -> bool:
    manager = database.db_manager
    return await manager.health_check() if manager else False


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(settings: Settings = Depends(get_settings)):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "voice-translator-api",
        "version": settings.app_version,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    if not await database_ok():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}


@api_health.get("")
async def api_health_check(settings: Settings = Depends(get_settings)):
    return {
        "success": True,
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": uptime_seconds(),
        "environment": settings.environment,
        "version": settings.app_version,
    }


@api_health.get("/detailed")
async def detailed_health_check(
    settings: Settings = Depends(get_settings),
    gemini: ResilientGeminiClient = Depends(get_gemini),
    sockets: SocketManager = Depends(get_socket_manager),
):
    memory = rss_megabytes()
    checks = {
        "database": {"status": "healthy" if await database_ok() else "unhealthy"},
        "gemini": {
            "status": "healthy" if gemini.is_configured else "unhealthy",
            "model": gemini.model,
        },
        "socket": {
            "status": "healthy" if sockets.is_ready() else "unhealthy",
            **({"stats": sockets.get_stats()} if sockets.is_ready() else {}),
        },
        "memory": {
            "status": "healthy" if memory < MEMORY_LIMIT_MB else "unhealthy",
            "rssMb": memory,
        },
    }
    healthy = all(c["status"] == "healthy" for c in checks.values())
    if not healthy:
        failing = [k for k, v in checks.items() if v["status"] != "healthy"]
        logger.warning(f"Detailed health check failed: {failing}")
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "success": healthy,
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": uptime_seconds(),
            "environment": settings.environment,
            "version": settings.app_version,
            "checks": checks,
        },
    )
