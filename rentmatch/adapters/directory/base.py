"""Participant records and the directory interface.

Registration and profile editing live outside this service; the core only
needs lookups and the tenant "active" toggle.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TenantStatus(str, Enum):
    WAITING = "Waiting"
    APPROVED = "Approved"


@dataclass(frozen=True)
class Owner:
    """A landlord offering a room."""

    id: str
    name: str
    whatsapp: str
    address: str
    created_at: datetime


@dataclass(frozen=True)
class Tenant:
    """A person looking for a room.

    Attributes:
        id: Participant id (see ``rentmatch.utils.identifiers``).
        name: Display name.
        mobile: Contact number shown to owners.
        area: Preferred area, may be empty.
        cast: Community declared at sign-up, may be empty.
        total_family_members: Household size.
        status: Verification state set by an admin.
        is_active: False once the tenant has left the market.
        created_at: Sign-up time.
    """

    id: str
    name: str
    mobile: str
    created_at: datetime
    area: str = ""
    cast: str = ""
    total_family_members: int = 0
    status: TenantStatus = TenantStatus.WAITING
    is_active: bool = True


class AbstractParticipantDirectory(ABC):
    """Interface for owner/tenant lookup."""

    @abstractmethod
    def add_owner(self, owner: Owner) -> Owner:
        raise NotImplementedError

    @abstractmethod
    def add_tenant(self, tenant: Tenant) -> Tenant:
        raise NotImplementedError

    @abstractmethod
    def find_owner(self, owner_id: str) -> Owner | None:
        """Return the owner or None for a dangling reference."""
        raise NotImplementedError

    @abstractmethod
    def find_tenant(self, tenant_id: str) -> Tenant | None:
        """Return the tenant or None for a dangling reference."""
        raise NotImplementedError

    @abstractmethod
    def set_tenant_active(self, tenant_id: str, is_active: bool) -> Tenant:
        """Toggle the tenant's active flag.

        Raises:
            NotFoundError: If the tenant does not exist.
        """
        raise NotImplementedError
