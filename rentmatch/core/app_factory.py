"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances.
"""

from __future__ import annotations

from fastapi import FastAPI

from rentmatch.api.routes import health_router, rent_requests_router, tenants_router
from rentmatch.core.config import settings
from rentmatch.core.exception_handlers import setup_exception_handlers
from rentmatch.core.logging import configure_logging
from rentmatch.core.middleware import request_id_middleware
from rentmatch.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title=settings.app.title,
        description=(
            "Rent-request workflow between owners and tenants: admission with "
            "per-pair cooldown and per-owner pending quota, lazy expiry of stale "
            "requests, tenant decisions and deactivation cascade."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(rent_requests_router, prefix="/v1")
    app.include_router(tenants_router, prefix="/v1")
    app.include_router(health_router)

    # OpenAPI customizations (security scheme, tags, exemptions)
    apply_openapi_customizations(app)

    return app
