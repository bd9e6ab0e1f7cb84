"""OpenAPI customization: bearer security scheme and tag descriptions."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_TAGS = [
    {
        "name": "Rent requests",
        "description": "Create, list and answer rent requests.",
    },
    {
        "name": "Tenants",
        "description": "Tenant market presence (activation toggle).",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to document bearer auth.

    - Adds a ``BearerAuth`` HTTP scheme (JWT) required on every operation
    - Exempts health endpoints with ``security: []``
    - Adds tag descriptions if not present
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "BearerAuth",
            {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Token issued by the account service.",
            },
        )
        schema.setdefault("security", [{"BearerAuth": []}])

        tags = schema.setdefault("tags", [])
        existing = {t.get("name") for t in tags}
        tags.extend(t for t in _TAGS if t["name"] not in existing)

        for path, methods in schema.get("paths", {}).items():
            if path.endswith("/health"):
                for method_obj in methods.values():
                    if isinstance(method_obj, dict):
                        method_obj["security"] = []

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
