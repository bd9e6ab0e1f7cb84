"""In-memory rent-request store.

Notes:
- Per-process only: running multiple workers gives each its own store.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Callable, Iterable

from rentmatch.adapters.store.base import (
    AbstractRequestStore,
    RentRequest,
    RequestFilter,
    RequestStatus,
)
from rentmatch.core.errors import (
    ConcurrentAdmissionError,
    DuplicateIdError,
    NotFoundError,
    RequestAlreadyResolvedError,
)

logger = logging.getLogger(__name__)


class InMemoryRequestStore(AbstractRequestStore):
    """Dict-backed store keeping requests in insertion order.

    Records are immutable dataclasses, so handing them out never exposes
    internal state. Ordering is by ``created_at`` with insertion order as the
    tie breaker.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, RentRequest] = {}
        self._sequence: dict[str, int] = {}
        self._owner_versions: defaultdict[str, int] = defaultdict(int)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def insert(
        self,
        record: RentRequest,
        *,
        expected_owner_version: int | None = None,
    ) -> RentRequest:
        with self._lock:
            if record.id in self._records:
                raise DuplicateIdError(
                    code="duplicate_request_id",
                    message=f"Rent request '{record.id}' already exists",
                    details={"rent_request_id": record.id},
                )

            current = self._owner_versions[record.owner_id]
            if expected_owner_version is not None and current != expected_owner_version:
                raise ConcurrentAdmissionError(
                    code="concurrent_admission",
                    message="Another request for this owner was created concurrently",
                    details={"owner_id": record.owner_id},
                )

            self._records[record.id] = record
            self._sequence[record.id] = len(self._sequence)
            self._owner_versions[record.owner_id] = current + 1

        logger.debug(
            "store.inserted",
            extra={"rent_request_id": record.id, "owner_id": record.owner_id},
        )
        return record

    def owner_version(self, owner_id: str) -> int:
        with self._lock:
            return self._owner_versions.get(owner_id, 0)

    def get(self, request_id: str) -> RentRequest:
        with self._lock:
            record = self._records.get(request_id)
        if record is None:
            raise NotFoundError(
                code="request_not_found",
                message="Request not found",
                details={"rent_request_id": request_id},
            )
        return record

    def _select(
        self,
        predicate: Callable[[RentRequest], bool],
        statuses: Iterable[RequestStatus] | None,
        newest_first: bool,
    ) -> list[RentRequest]:
        wanted = frozenset(statuses) if statuses is not None else None
        with self._lock:
            rows = [
                r
                for r in self._records.values()
                if predicate(r) and (wanted is None or r.status in wanted)
            ]
            rows.sort(key=lambda r: (r.created_at, self._sequence[r.id]), reverse=newest_first)
        return rows

    def find_by_owner(
        self,
        owner_id: str,
        *,
        statuses: Iterable[RequestStatus] | None = None,
        newest_first: bool = True,
    ) -> list[RentRequest]:
        return self._select(lambda r: r.owner_id == owner_id, statuses, newest_first)

    def find_by_tenant(
        self,
        tenant_id: str,
        *,
        statuses: Iterable[RequestStatus] | None = None,
        newest_first: bool = True,
    ) -> list[RentRequest]:
        return self._select(lambda r: r.tenant_id == tenant_id, statuses, newest_first)

    def find_pair(
        self,
        owner_id: str,
        tenant_id: str,
        *,
        statuses: Iterable[RequestStatus] | None = None,
        newest_first: bool = True,
    ) -> list[RentRequest]:
        return self._select(
            lambda r: r.owner_id == owner_id and r.tenant_id == tenant_id,
            statuses,
            newest_first,
        )

    def update_status(
        self,
        request_id: str,
        new_status: RequestStatus,
        *,
        from_statuses: Iterable[RequestStatus] | None = None,
    ) -> RentRequest:
        allowed = frozenset(from_statuses) if from_statuses is not None else None
        with self._lock:
            record = self.get(request_id)
            if allowed is not None and record.status not in allowed:
                raise RequestAlreadyResolvedError(
                    code="request_already_resolved",
                    message=f"Request is already {record.status.value}",
                    details={
                        "rent_request_id": request_id,
                        "status": record.status.value,
                    },
                )
            updated = record.with_status(new_status)
            self._records[request_id] = updated
        return updated

    def bulk_update_status(self, request_filter: RequestFilter, new_status: RequestStatus) -> int:
        with self._lock:
            targets = [
                r
                for r in self._records.values()
                if request_filter.matches(r) and r.status is not new_status
            ]
            for record in targets:
                self._records[record.id] = record.with_status(new_status)
        return len(targets)
