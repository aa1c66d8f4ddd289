"""Liveness and readiness probes for the catalog API."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.db.session import engine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live", summary="Liveness probe")
async def live() -> dict[str, str]:
    """The process is up and serving requests."""
    return {"status": "ok", "service": get_settings().app_name}


def _probe_database() -> dict[str, Any]:
    started = time.perf_counter()
    with engine.connect() as conn:
        conn.execute(text("SELECT 1")).scalar()
    return {
        "status": "healthy",
        "latencyMs": round((time.perf_counter() - started) * 1000, 2),
    }


@router.get("/ready", summary="Readiness probe")
async def ready() -> dict[str, Any]:
    """Report whether the catalog store is reachable.

    Answers 503 with the same body shape when it is not, so load balancers
    can take the instance out of rotation.
    """
    report: dict[str, Any] = {"service": get_settings().app_name}
    try:
        report["checks"] = {"database": _probe_database()}
    except SQLAlchemyError as e:
        logger.error(f"Readiness check could not reach the database: {e}", exc_info=True)
        report["status"] = "unhealthy"
        report["checks"] = {
            "database": {"status": "unhealthy", "message": "Database unreachable"}
        }
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=report
        ) from e

    report["status"] = "ok"
    return report
