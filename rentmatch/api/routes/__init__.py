from __future__ import annotations

from rentmatch.api.routes.health import router as health_router
from rentmatch.api.routes.rent_requests import router as rent_requests_router
from rentmatch.api.routes.tenants import router as tenants_router

__all__ = ["health_router", "rent_requests_router", "tenants_router"]
