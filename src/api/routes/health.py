from __future__ import annotations

from datetime import UTC, datetime

import httpx
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db_session
from src.config.settings import get_settings

router = APIRouter(tags=["health"])


class DependencyHealth(BaseModel):
    status: str  # "healthy" or "unhealthy"
    message: str | None = None


class HealthResponse(BaseModel):
    status: str  # "healthy", "degraded", or "unhealthy"
    dependencies: dict[str, DependencyHealth]
    timestamp: datetime


async def _check_database(session: AsyncSession) -> DependencyHealth:
    try:
        await session.execute(text("SELECT 1"))
        return DependencyHealth(status="healthy")
    except Exception as exc:
        return DependencyHealth(status="unhealthy", message=str(exc))


async def _check_otel() -> DependencyHealth:
    """Best-effort check: verify the OTel collector port answers."""
    settings = get_settings()
    try:
        async with httpx.AsyncClient(timeout=3.0) as client:
            # The collector speaks gRPC; any HTTP answer proves the port is open
            await client.get(settings.OTEL_EXPORTER_OTLP_ENDPOINT)
            return DependencyHealth(status="healthy")
    except Exception:
        # OTel is non-critical: a bad endpoint or a closed port only degrades
        return DependencyHealth(
            status="unhealthy", message="OTel endpoint unreachable"
        )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    session: AsyncSession = Depends(get_db_session),
) -> HealthResponse:
    db = await _check_database(session)
    otel = await _check_otel()

    if db.status != "healthy":
        status = "unhealthy"
    elif otel.status != "healthy":
        status = "degraded"
    else:
        status = "healthy"

    return HealthResponse(
        status=status,
        dependencies={"database": db, "otel": otel},
        timestamp=datetime.now(UTC),
    )
