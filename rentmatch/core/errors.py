"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional so each error only carries what is relevant to it.
    """

    hint: str
    request_id: str
    rent_request_id: str
    owner_id: str
    tenant_id: str
    status: str
    allowed: list[str]
    reason: str
    hours_remaining: int
    next_available_at: str
    attempts: int
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when the caller cannot be identified."""


class PermissionAppError(AppError):
    """Raised when an identified caller may not perform the operation."""


class NotFoundError(AppError):
    """Raised when a rent request or participant does not exist."""


class DuplicateIdError(AppError):
    """Raised when inserting a rent request whose id already exists."""


class ConcurrentAdmissionError(AppError):
    """Raised when another admission for the same owner committed first."""


class InvalidStatusError(AppError):
    """Raised when a status change targets a value outside the allowed set."""


class RequestAlreadyResolvedError(InvalidStatusError):
    """Raised when a decision is applied to a request that is no longer pending."""


class AdmissionDeniedError(AppError):
    """Raised when cooldown or quota rules block a new rent request.

    ``details`` always carries ``hours_remaining``, ``next_available_at``
    and ``reason``.
    """

    @property
    def hours_remaining(self) -> int:
        return int((self.details or {}).get("hours_remaining", 0))
