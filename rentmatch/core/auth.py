"""Bearer token authentication and role checks.

Tokens are issued by the account service; this module only verifies them
with PyJWT and exposes the caller as a ``Principal``.

Expected claims::

    {"user": {"id": "OWNER_919876543210", "role": "owner"}, "exp": ...}

Legacy role names from the account service ("malik", "bhadot") are mapped to
"owner" and "tenant".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable, Literal

import jwt
from fastapi import Depends, Header

from rentmatch.core.config import settings
from rentmatch.core.errors import AuthenticationAppError, PermissionAppError

logger = logging.getLogger(__name__)

Role = Literal["owner", "tenant", "admin"]

_ROLE_ALIASES: dict[str, str] = {
    "owner": "owner",
    "malik": "owner",
    "tenant": "tenant",
    "bhadot": "tenant",
    "admin": "admin",
}


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""

    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def extract_bearer(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header.

    Examples:
        >>> extract_bearer("Bearer abc.def.ghi")
        'abc.def.ghi'
        >>> extract_bearer("Basic xyz") is None
        True
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def principal_from_claims(claims: dict[str, Any]) -> Principal:
    """Build a Principal from decoded token claims.

    Raises:
        AuthenticationAppError: If id or role are missing or the role is unknown.
    """
    user = claims.get("user") if isinstance(claims.get("user"), dict) else {}
    user_id = user.get("id") or claims.get("sub")
    raw_role = str(user.get("role") or claims.get("role") or "").lower()
    role = _ROLE_ALIASES.get(raw_role)

    if not user_id or role is None:
        raise AuthenticationAppError(
            code="invalid_token_claims",
            message="Token does not identify a known user and role",
        )
    return Principal(id=str(user_id), role=role)  # type: ignore[arg-type]


def decode_token(token: str) -> Principal:
    """Verify a token's signature and expiry and return its principal.

    Raises:
        AuthenticationAppError: If verification is not configured or fails.
    """
    secret = settings.auth.jwt_secret
    if not secret:
        logger.error(
            "auth.not_configured",
            extra={"auth_required": settings.auth.required},
        )
        raise AuthenticationAppError(
            code="auth_not_configured",
            message="Token authentication is enabled but no signing secret is configured",
            details={"hint": "Set AUTH_JWT_SECRET or disable auth with AUTH_REQUIRED=false"},
        )

    try:
        claims = jwt.decode(token, secret, algorithms=[settings.auth.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        logger.warning("auth.token_expired")
        raise AuthenticationAppError(code="token_expired", message="Token has expired") from exc
    except jwt.PyJWTError as exc:
        logger.warning("auth.invalid_token", extra={"error_type": type(exc).__name__})
        raise AuthenticationAppError(code="invalid_token", message="Invalid token") from exc

    return principal_from_claims(claims)


async def get_current_principal(
    authorization: Annotated[str | None, Header()] = None,
) -> Principal | None:
    """FastAPI dependency resolving the caller.

    Returns None when authentication is disabled (AUTH_REQUIRED=false).

    Raises:
        AuthenticationAppError: 401 when the token is missing or invalid.
    """
    if not settings.auth.required:
        logger.debug("auth.skipped", extra={"reason": "auth_required_false"})
        return None

    token = extract_bearer(authorization)
    if token is None:
        logger.warning("auth.missing_token")
        raise AuthenticationAppError(
            code="missing_token",
            message="Missing bearer token. Provide an Authorization header.",
        )

    principal = decode_token(token)
    logger.debug("auth.success", extra={"user_id": principal.id, "role": principal.role})
    return principal


def require_roles(*roles: Role) -> Callable[..., Awaitable[Principal | None]]:
    """Build a dependency that admits only the given roles.

    Usage:
        @router.get("/x")
        async def x(principal: Principal | None = Depends(require_roles("owner"))):
            ...
    """

    async def _dependency(
        principal: Annotated[Principal | None, Depends(get_current_principal)],
    ) -> Principal | None:
        if principal is not None and principal.role not in roles:
            logger.warning(
                "auth.forbidden_role",
                extra={"role": principal.role, "allowed_roles": list(roles)},
            )
            raise PermissionAppError(
                code="forbidden_role",
                message="Access denied for this role",
                details={"allowed": list(roles)},
            )
        return principal

    return _dependency


def ensure_self(principal: Principal | None, participant_id: str) -> None:
    """Allow admins and the participant themselves; reject anyone else.

    Raises:
        PermissionAppError: If the caller acts on another participant.
    """
    if principal is None or principal.is_admin or principal.id == participant_id:
        return
    raise PermissionAppError(
        code="forbidden_participant",
        message="You can only act on your own account",
    )
