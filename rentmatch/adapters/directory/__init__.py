"""Owner and tenant lookup adapters."""

from rentmatch.adapters.directory.base import (
    AbstractParticipantDirectory,
    Owner,
    Tenant,
    TenantStatus,
)
from rentmatch.adapters.directory.in_memory import InMemoryParticipantDirectory

__all__ = [
    "AbstractParticipantDirectory",
    "InMemoryParticipantDirectory",
    "Owner",
    "Tenant",
    "TenantStatus",
]
