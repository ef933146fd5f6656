"""Health check endpoints."""

import time
from datetime import UTC, datetime

import structlog
from fastapi import APIRouter
from pydantic import BaseModel, Field
from sqlalchemy import text

from intake import __version__
from intake.config import get_settings
from intake.database import get_session_maker

router = APIRouter(tags=["Health"])
logger = structlog.get_logger()

# Track server start time for uptime calculation
_server_start_time = time.time()


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str = Field(..., description="Health status: healthy, unhealthy")
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    version: str = Field(..., description="Service version")
    uptime_seconds: int = Field(..., description="Server uptime in seconds")


class DatabaseCheck(BaseModel):
    """Database probe result."""

    status: str
    latency_ms: float | None = None
    error: str | None = None


class ReadyResponse(HealthResponse):
    """Readiness response with the database probe."""

    database: DatabaseCheck


class ApiInfoResponse(BaseModel):
    name: str
    version: str
    env: str


def _uptime() -> int:
    return int(time.time() - _server_start_time)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Healthy whenever the process is serving. Does not touch the database."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC).isoformat(),
        version=__version__,
        uptime_seconds=_uptime(),
    )


@router.get("/ready", response_model=ReadyResponse)
async def readiness_check() -> ReadyResponse:
    """Healthy only when the database answers ``SELECT 1``."""
    try:
        start = time.perf_counter()
        async with get_session_maker()() as session:
            await session.execute(text("SELECT 1"))
        check = DatabaseCheck(
            status="healthy",
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
        )
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        check = DatabaseCheck(status="unhealthy", error="database unavailable")

    return ReadyResponse(
        status=check.status,
        timestamp=datetime.now(UTC).isoformat(),
        version=__version__,
        uptime_seconds=_uptime(),
        database=check,
    )


@router.get("/", response_model=ApiInfoResponse)
async def root() -> ApiInfoResponse:
    settings = get_settings()
    return ApiInfoResponse(name="Intake Funnel API", version=__version__, env=settings.env)
