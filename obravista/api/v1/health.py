"""Health endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter

from obravista.core.config import get_config
from obravista.schemas.common import ok

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    cfg = get_config()
    return ok({"status": "ok", "service": cfg.APP_NAME, "version": cfg.APP_VERSION})
