"""Identifier helpers.

Participant ids are derived from a contact number so a person registering
twice with the same number collides on the id. Rent-request ids combine the
creation time with a random suffix.
"""

from __future__ import annotations

import re
import secrets
import time
from typing import Literal

from rentmatch.core.errors import ValidationAppError

ParticipantRole = Literal["owner", "tenant"]

_NON_DIGITS = re.compile(r"\D")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_ROLE_PREFIX: dict[str, str] = {"owner": "OWNER", "tenant": "TENANT"}


def normalize_participant_id(role: ParticipantRole, contact_number: str) -> str:
    """Build a participant id from a phone/WhatsApp number.

    Args:
        role: "owner" or "tenant".
        contact_number: Number in any format ("+91 98765-43210").

    Returns:
        Role-prefixed digits, e.g. ``OWNER_919876543210``.

    Raises:
        ValidationAppError: If the role is unknown or the number has no digits.

    Examples:
        >>> normalize_participant_id("tenant", "+91 98765-43210")
        'TENANT_919876543210'
    """
    prefix = _ROLE_PREFIX.get(role)
    if prefix is None:
        raise ValidationAppError(
            code="unknown_participant_role",
            message=f"Unknown participant role: '{role}'",
        )

    digits = _NON_DIGITS.sub("", contact_number or "")
    if not digits:
        raise ValidationAppError(
            code="invalid_contact_number",
            message="Contact number must contain at least one digit",
        )
    return f"{prefix}_{digits}"


def generate_request_id(now_ms: int | None = None) -> str:
    """Return ``REQ_<epoch millis>_<9 random base-36 chars>``."""
    millis = int(time.time() * 1000) if now_ms is None else now_ms
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"REQ_{millis}_{suffix}"
