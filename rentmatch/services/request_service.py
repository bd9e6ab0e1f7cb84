"""Rent-request workflow orchestrating admission, expiry and transitions.

This service is what the HTTP layer calls. It handles:
- Admission of new requests with an optimistic owner-version check
- Expiry sweeps before every listing
- Enrichment of listings with participant display fields
- Tenant decisions and the deactivation cascade
"""

from __future__ import annotations

import logging
from datetime import timedelta

from rentmatch.adapters.directory.base import AbstractParticipantDirectory, Tenant
from rentmatch.adapters.store.base import AbstractRequestStore, RentRequest, RequestStatus
from rentmatch.core.config import RequestPolicySettings
from rentmatch.core.errors import (
    AdmissionDeniedError,
    ConcurrentAdmissionError,
    ValidationAppError,
)
from rentmatch.schemas.rent_requests import OwnerRequestView, TenantRequestView
from rentmatch.services.admission import AdmissionPolicy, evaluate_admission
from rentmatch.services.expiry import sweep_expired
from rentmatch.services.transitions import cascade_deactivate, parse_decision, set_status
from rentmatch.utils.clock import Clock, utc_now
from rentmatch.utils.identifiers import generate_request_id

logger = logging.getLogger(__name__)


class RentRequestService:
    """Entry point for the rent-request lifecycle.

    Attributes:
        store: Rent-request persistence.
        directory: Owner/tenant lookup used for enrichment and deactivation.
        policy: Admission limits.
        expiry_horizon: Age after which live requests expire.
        max_attempts: Admission re-evaluations allowed when racing another insert.
    """

    def __init__(
        self,
        store: AbstractRequestStore,
        directory: AbstractParticipantDirectory,
        *,
        policy: AdmissionPolicy | None = None,
        expiry_horizon: timedelta = timedelta(days=5),
        max_attempts: int = 3,
        clock: Clock = utc_now,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        self.store = store
        self.directory = directory
        self.policy = policy or AdmissionPolicy()
        self.expiry_horizon = expiry_horizon
        self.max_attempts = max_attempts
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        store: AbstractRequestStore,
        directory: AbstractParticipantDirectory,
        cfg: RequestPolicySettings,
        *,
        clock: Clock = utc_now,
    ) -> "RentRequestService":
        return cls(
            store,
            directory,
            policy=AdmissionPolicy.from_settings(cfg),
            expiry_horizon=timedelta(days=cfg.expiry_days),
            max_attempts=cfg.admission_max_attempts,
            clock=clock,
        )

    def _validate_pair(self, owner_id: str, tenant_id: str) -> None:
        if not owner_id or not owner_id.strip() or not tenant_id or not tenant_id.strip():
            raise ValidationAppError(
                code="missing_participant_id",
                message="owner_id and tenant_id are required",
            )
        if owner_id == tenant_id:
            raise ValidationAppError(
                code="self_request",
                message="An owner cannot send a request to themselves",
                details={"owner_id": owner_id},
            )

    def _try_admit(self, owner_id: str, tenant_id: str) -> RentRequest:
        """Evaluate admission once against a fresh snapshot and insert."""
        now = self._clock()
        version = self.store.owner_version(owner_id)
        pair_history = self.store.find_pair(owner_id, tenant_id, newest_first=True)
        owner_pending = self.store.find_by_owner(
            owner_id,
            statuses={RequestStatus.PENDING},
            newest_first=False,
        )

        decision = evaluate_admission(pair_history, owner_pending, now, self.policy)
        if not decision.allowed:
            logger.warning(
                "admission.denied",
                extra={
                    "owner_id": owner_id,
                    "tenant_id": tenant_id,
                    "reason": decision.reason,
                    "hours_remaining": decision.hours_remaining,
                },
            )
            raise AdmissionDeniedError(
                code="admission_denied",
                message=decision.message or "Request not allowed yet",
                details={
                    "reason": decision.reason or "",
                    "hours_remaining": decision.hours_remaining or 1,
                    "next_available_at": decision.next_available_at.isoformat()
                    if decision.next_available_at
                    else "",
                    "owner_id": owner_id,
                    "tenant_id": tenant_id,
                },
            )

        record = RentRequest(
            id=generate_request_id(int(now.timestamp() * 1000)),
            owner_id=owner_id,
            tenant_id=tenant_id,
            status=RequestStatus.PENDING,
            created_at=now,
        )
        return self.store.insert(record, expected_owner_version=version)

    def create_request(self, owner_id: str, tenant_id: str) -> RentRequest:
        """Create a pending request from an owner to a tenant.

        Args:
            owner_id: Requesting owner.
            tenant_id: Requested tenant.

        Returns:
            The stored pending request.

        Raises:
            ValidationAppError: If ids are missing or identical.
            AdmissionDeniedError: If cooldown or quota rules block the request.
            ConcurrentAdmissionError: If concurrent inserts for the owner kept
                winning for ``max_attempts`` evaluations.
        """
        self._validate_pair(owner_id, tenant_id)

        attempt = 0
        while True:
            attempt += 1
            try:
                record = self._try_admit(owner_id, tenant_id)
            except ConcurrentAdmissionError as exc:
                if attempt >= self.max_attempts:
                    exc.details = {**(exc.details or {}), "attempts": attempt}
                    raise
                logger.info(
                    "admission.retry",
                    extra={"owner_id": owner_id, "attempt": attempt},
                )
                continue

            logger.info(
                "admission.created",
                extra={
                    "rent_request_id": record.id,
                    "owner_id": owner_id,
                    "tenant_id": tenant_id,
                    "attempt": attempt,
                },
            )
            return record

    def list_for_owner(self, owner_id: str) -> list[OwnerRequestView]:
        """Owner dashboard: newest first, expired requests hidden."""
        sweep_expired(
            self.store,
            now=self._clock(),
            horizon=self.expiry_horizon,
            owner_id=owner_id,
        )
        visible = [
            RequestStatus.PENDING,
            RequestStatus.ACCEPTED,
            RequestStatus.REJECTED,
        ]
        records = self.store.find_by_owner(owner_id, statuses=visible, newest_first=True)

        views: list[OwnerRequestView] = []
        for record in records:
            tenant = self.directory.find_tenant(record.tenant_id)
            view = OwnerRequestView(
                id=record.id,
                tenant_id=record.tenant_id,
                status=record.status,
                created_at=record.created_at,
            )
            if tenant is not None:
                view = view.model_copy(
                    update={
                        "tenant_name": tenant.name,
                        "tenant_mobile": tenant.mobile,
                        "tenant_area": tenant.area,
                        "tenant_cast": tenant.cast,
                        "tenant_total_family_members": tenant.total_family_members,
                    }
                )
            views.append(view)
        return views

    def list_for_tenant(self, tenant_id: str) -> list[TenantRequestView]:
        """Tenant dashboard: newest first, expired requests included.

        Owner WhatsApp and address are only revealed on Accepted requests.
        """
        sweep_expired(
            self.store,
            now=self._clock(),
            horizon=self.expiry_horizon,
            tenant_id=tenant_id,
        )
        records = self.store.find_by_tenant(tenant_id, newest_first=True)

        views: list[TenantRequestView] = []
        for record in records:
            owner = self.directory.find_owner(record.owner_id)
            reveal = owner is not None and record.status is RequestStatus.ACCEPTED
            views.append(
                TenantRequestView(
                    id=record.id,
                    owner_id=record.owner_id,
                    owner_name=owner.name if owner is not None else "Unknown",
                    owner_whatsapp=owner.whatsapp if reveal else None,
                    owner_address=owner.address if reveal else None,
                    status=record.status,
                    created_at=record.created_at,
                )
            )
        return views

    def respond(
        self,
        request_id: str,
        decision: str | RequestStatus,
        *,
        acting_tenant_id: str | None = None,
    ) -> RentRequest:
        """Apply the tenant's Accepted/Rejected decision.

        The tenant's stale requests are expired first, so a request past the
        expiry horizon can no longer be accepted.
        """
        status = parse_decision(decision)
        record = self.store.get(request_id)
        sweep_expired(
            self.store,
            now=self._clock(),
            horizon=self.expiry_horizon,
            tenant_id=record.tenant_id,
        )
        return set_status(
            self.store,
            request_id,
            status,
            acting_tenant_id=acting_tenant_id,
        )

    def set_tenant_active(self, tenant_id: str, is_active: bool) -> tuple[Tenant, int]:
        """Toggle a tenant's active flag; deactivation rejects live requests.

        Returns:
            Tuple of (updated tenant, number of requests rejected).

        Raises:
            NotFoundError: If the tenant does not exist.
        """
        tenant = self.directory.set_tenant_active(tenant_id, is_active)
        rejected = 0
        if not tenant.is_active:
            rejected = cascade_deactivate(self.store, tenant_id)
        logger.info(
            "tenant.active_changed",
            extra={
                "tenant_id": tenant_id,
                "is_active": tenant.is_active,
                "rejected": rejected,
            },
        )
        return tenant, rejected

    def deactivate_tenant(self, tenant_id: str) -> int:
        """Shortcut for ``set_tenant_active(tenant_id, False)``; returns rejected count."""
        _, rejected = self.set_tenant_active(tenant_id, False)
        return rejected
