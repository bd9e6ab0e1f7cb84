"""Status transitions for rent requests.

Pending is the only state a tenant can decide on. Accepted requests can
still be moved by the system (expiry or deactivation cascade); Rejected and
Expired are final. Nothing returns to Pending.
"""

from __future__ import annotations

import logging

from rentmatch.adapters.store.base import (
    LIVE_STATUSES,
    AbstractRequestStore,
    RentRequest,
    RequestFilter,
    RequestStatus,
)
from rentmatch.core.errors import InvalidStatusError, PermissionAppError

logger = logging.getLogger(__name__)

DECISION_STATUSES: frozenset[RequestStatus] = frozenset(
    {RequestStatus.ACCEPTED, RequestStatus.REJECTED}
)


def parse_decision(value: str | RequestStatus) -> RequestStatus:
    """Coerce a tenant decision to a status, rejecting anything but Accepted/Rejected."""
    try:
        status = RequestStatus(value)
    except ValueError:
        status = None
    if status not in DECISION_STATUSES:
        raise InvalidStatusError(
            code="invalid_status",
            message="Invalid status",
            details={
                "status": str(getattr(value, "value", value)),
                "allowed": sorted(s.value for s in DECISION_STATUSES),
            },
        )
    return status


def set_status(
    store: AbstractRequestStore,
    request_id: str,
    new_status: str | RequestStatus,
    *,
    acting_tenant_id: str | None,
) -> RentRequest:
    """Apply a tenant's accept/reject decision.

    Args:
        store: Request store.
        request_id: Request being answered.
        new_status: "Accepted" or "Rejected".
        acting_tenant_id: Tenant making the call; None skips the ownership
            check (authentication disabled).

    Returns:
        The updated request.

    Raises:
        InvalidStatusError: If the target is not Accepted/Rejected.
        NotFoundError: If the request does not exist.
        PermissionAppError: If the caller is not the request's tenant.
        RequestAlreadyResolvedError: If the request is no longer pending.
    """
    status = parse_decision(new_status)
    record = store.get(request_id)

    if acting_tenant_id is not None and record.tenant_id != acting_tenant_id:
        raise PermissionAppError(
            code="not_request_tenant",
            message="Only the requested tenant can respond to this request",
            details={"rent_request_id": request_id},
        )

    updated = store.update_status(
        request_id,
        status,
        from_statuses={RequestStatus.PENDING},
    )
    logger.info(
        "transition.decided",
        extra={
            "rent_request_id": request_id,
            "tenant_id": record.tenant_id,
            "status": updated.status.value,
        },
    )
    return updated


def cascade_deactivate(store: AbstractRequestStore, tenant_id: str) -> int:
    """Reject every pending or accepted request of a tenant leaving the market.

    Safe to repeat: a second call finds nothing left to change.

    Returns:
        Number of requests rejected.
    """
    rejected = store.bulk_update_status(
        RequestFilter(tenant_id=tenant_id, statuses=LIVE_STATUSES),
        RequestStatus.REJECTED,
    )
    logger.info(
        "transition.cascade",
        extra={"tenant_id": tenant_id, "rejected": rejected},
    )
    return rejected
