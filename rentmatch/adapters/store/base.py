"""Rent-request records and the store interface.

The services depend on this abstraction (not the concrete implementation)
so the storage backend can be swapped later with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable


class RequestStatus(str, Enum):
    """Lifecycle state of a rent request."""

    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    EXPIRED = "Expired"


# Statuses the sweeper and the deactivation cascade may still move
LIVE_STATUSES: frozenset[RequestStatus] = frozenset(
    {RequestStatus.PENDING, RequestStatus.ACCEPTED}
)


@dataclass(frozen=True)
class RentRequest:
    """A request from an owner to a tenant.

    Attributes:
        id: Unique request identifier.
        owner_id: Requesting owner (weak reference).
        tenant_id: Requested tenant (weak reference).
        status: Current lifecycle state.
        created_at: Timezone-aware creation time; never changes.
    """

    id: str
    owner_id: str
    tenant_id: str
    status: RequestStatus
    created_at: datetime

    def with_status(self, status: RequestStatus) -> "RentRequest":
        return RentRequest(
            id=self.id,
            owner_id=self.owner_id,
            tenant_id=self.tenant_id,
            status=status,
            created_at=self.created_at,
        )


@dataclass(frozen=True)
class RequestFilter:
    """Match criteria for bulk status updates.

    Unset fields match everything. ``created_before`` is exclusive.
    """

    owner_id: str | None = None
    tenant_id: str | None = None
    statuses: frozenset[RequestStatus] | None = None
    created_before: datetime | None = None

    def matches(self, record: RentRequest) -> bool:
        if self.owner_id is not None and record.owner_id != self.owner_id:
            return False
        if self.tenant_id is not None and record.tenant_id != self.tenant_id:
            return False
        if self.statuses is not None and record.status not in self.statuses:
            return False
        if self.created_before is not None and not record.created_at < self.created_before:
            return False
        return True


class AbstractRequestStore(ABC):
    """Interface for rent-request persistence.

    Every method is atomic on its own. Multi-step sequences are made safe by
    the owner version check on ``insert``.
    """

    @abstractmethod
    def insert(
        self,
        record: RentRequest,
        *,
        expected_owner_version: int | None = None,
    ) -> RentRequest:
        """Persist a new request.

        Args:
            record: Request to store.
            expected_owner_version: When given, insert only if the owner's
                version still equals this value.

        Returns:
            The stored record.

        Raises:
            DuplicateIdError: If a request with the same id exists.
            ConcurrentAdmissionError: If the owner version moved.
        """
        raise NotImplementedError

    @abstractmethod
    def owner_version(self, owner_id: str) -> int:
        """Return a counter that increases on every insert for the owner."""
        raise NotImplementedError

    @abstractmethod
    def get(self, request_id: str) -> RentRequest:
        """Fetch one request.

        Raises:
            NotFoundError: If no request has this id.
        """
        raise NotImplementedError

    @abstractmethod
    def find_by_owner(
        self,
        owner_id: str,
        *,
        statuses: Iterable[RequestStatus] | None = None,
        newest_first: bool = True,
    ) -> list[RentRequest]:
        raise NotImplementedError

    @abstractmethod
    def find_by_tenant(
        self,
        tenant_id: str,
        *,
        statuses: Iterable[RequestStatus] | None = None,
        newest_first: bool = True,
    ) -> list[RentRequest]:
        raise NotImplementedError

    @abstractmethod
    def find_pair(
        self,
        owner_id: str,
        tenant_id: str,
        *,
        statuses: Iterable[RequestStatus] | None = None,
        newest_first: bool = True,
    ) -> list[RentRequest]:
        raise NotImplementedError

    @abstractmethod
    def update_status(
        self,
        request_id: str,
        new_status: RequestStatus,
        *,
        from_statuses: Iterable[RequestStatus] | None = None,
    ) -> RentRequest:
        """Change the status of one request.

        Args:
            request_id: Request to update.
            new_status: Target status.
            from_statuses: When given, the update only applies if the
                current status is one of these.

        Returns:
            The updated record.

        Raises:
            NotFoundError: If no request has this id.
            RequestAlreadyResolvedError: If the current status is not in
                ``from_statuses``.
        """
        raise NotImplementedError

    @abstractmethod
    def bulk_update_status(self, request_filter: RequestFilter, new_status: RequestStatus) -> int:
        """Set ``new_status`` on every matching request in one step.

        Returns:
            Number of requests whose status changed.
        """
        raise NotImplementedError
