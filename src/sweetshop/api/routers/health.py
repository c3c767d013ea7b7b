"""
sweetshop.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probes (`/healthz`, and `/api/ping` for existing keep-alive clients).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from sweetshop.api.deps import db_session

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/api/ping")
async def ping() -> dict[str, str]:
    return {"status": "ok", "time": datetime.now(tz=UTC).isoformat()}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    # Readiness: verify critical dependency (DB) is reachable.
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
