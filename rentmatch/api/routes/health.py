from __future__ import annotations

from fastapi import APIRouter

from rentmatch.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe; no authentication, no store access."""

    return {"status": "ok", "environment": settings.app_env}
