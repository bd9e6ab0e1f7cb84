from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from rentmatch.api.deps import get_request_service
from rentmatch.core.auth import Principal, ensure_self, require_roles
from rentmatch.schemas.rent_requests import TenantActiveBody, TenantActiveResponse
from rentmatch.services.request_service import RentRequestService

router = APIRouter(tags=["Tenants"])


@router.put("/tenants/{tenant_id}/active", response_model=TenantActiveResponse)
async def set_tenant_active(
    tenant_id: str,
    body: TenantActiveBody,
    service: Annotated[RentRequestService, Depends(get_request_service)],
    principal: Annotated[Principal | None, Depends(require_roles("tenant"))],
) -> TenantActiveResponse:
    """Enter or leave the market.

    Leaving rejects every pending or accepted request for the tenant.
    Coming back does not restore them.
    """
    ensure_self(principal, tenant_id)
    tenant, rejected = service.set_tenant_active(tenant_id, body.is_active)
    return TenantActiveResponse(
        tenant_id=tenant.id,
        is_active=tenant.is_active,
        rejected_requests=rejected,
    )
