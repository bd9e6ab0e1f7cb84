"""In-memory participant directory (per-process, thread-safe)."""

from __future__ import annotations

import dataclasses
import threading

from rentmatch.adapters.directory.base import AbstractParticipantDirectory, Owner, Tenant
from rentmatch.core.errors import DuplicateIdError, NotFoundError


class InMemoryParticipantDirectory(AbstractParticipantDirectory):
    """Dict-backed owners and tenants keyed by participant id."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._owners: dict[str, Owner] = {}
        self._tenants: dict[str, Tenant] = {}

    def add_owner(self, owner: Owner) -> Owner:
        with self._lock:
            if owner.id in self._owners:
                raise DuplicateIdError(
                    code="duplicate_owner_id",
                    message="Owner already exists with this WhatsApp number",
                    details={"owner_id": owner.id},
                )
            self._owners[owner.id] = owner
        return owner

    def add_tenant(self, tenant: Tenant) -> Tenant:
        with self._lock:
            if tenant.id in self._tenants:
                raise DuplicateIdError(
                    code="duplicate_tenant_id",
                    message="Tenant already exists with this mobile number",
                    details={"tenant_id": tenant.id},
                )
            self._tenants[tenant.id] = tenant
        return tenant

    def find_owner(self, owner_id: str) -> Owner | None:
        with self._lock:
            return self._owners.get(owner_id)

    def find_tenant(self, tenant_id: str) -> Tenant | None:
        with self._lock:
            return self._tenants.get(tenant_id)

    def set_tenant_active(self, tenant_id: str, is_active: bool) -> Tenant:
        with self._lock:
            tenant = self._tenants.get(tenant_id)
            if tenant is None:
                raise NotFoundError(
                    code="tenant_not_found",
                    message="Tenant not found",
                    details={"tenant_id": tenant_id},
                )
            updated = dataclasses.replace(tenant, is_active=bool(is_active))
            self._tenants[tenant_id] = updated
        return updated
