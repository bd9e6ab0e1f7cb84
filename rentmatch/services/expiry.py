"""Lazy expiry of stale rent requests.

Listings call ``sweep_expired`` for their subject (one owner or one tenant)
before querying, so the query that follows already sees the new statuses.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from rentmatch.adapters.store.base import (
    LIVE_STATUSES,
    AbstractRequestStore,
    RequestFilter,
    RequestStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_HORIZON = timedelta(days=5)


def sweep_expired(
    store: AbstractRequestStore,
    *,
    now: datetime,
    horizon: timedelta = DEFAULT_EXPIRY_HORIZON,
    owner_id: str | None = None,
    tenant_id: str | None = None,
) -> int:
    """Mark pending/accepted requests older than ``horizon`` as expired.

    Args:
        store: Request store to update.
        now: Reference instant.
        horizon: Maximum age of a live request.
        owner_id: Restrict the sweep to this owner's requests.
        tenant_id: Restrict the sweep to this tenant's requests.

    Returns:
        Number of requests that were expired by this call.

    Raises:
        ValueError: If neither owner_id nor tenant_id is given.
    """
    if owner_id is None and tenant_id is None:
        raise ValueError("sweep_expired needs an owner_id or a tenant_id scope")

    expired = store.bulk_update_status(
        RequestFilter(
            owner_id=owner_id,
            tenant_id=tenant_id,
            statuses=LIVE_STATUSES,
            created_before=now - horizon,
        ),
        RequestStatus.EXPIRED,
    )
    if expired:
        logger.info(
            "expiry.swept",
            extra={
                "owner_id": owner_id,
                "tenant_id": tenant_id,
                "expired": expired,
                "horizon_days": horizon.days,
            },
        )
    return expired
