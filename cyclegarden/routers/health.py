"""Health check endpoint."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from cyclegarden.config import get_settings

router = APIRouter(tags=["system"])
logger = logging.getLogger("cyclegarden.health")


@router.get("/health")
async def health_check() -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Also checks that the data directory is writable.
    """
    settings = get_settings()
    storage_ok = False
    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        probe = settings.data_dir / ".health"
        probe.write_text("ok", encoding="utf-8")
        probe.unlink()
        storage_ok = True
    except OSError as exc:
        logger.warning("Health check storage probe failed: %s", exc)

    return {
        "status": "healthy" if storage_ok else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "storage": "writable" if storage_ok else "unwritable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
