from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from rentmatch.api.deps import get_request_service
from rentmatch.core.auth import Principal, ensure_self, require_roles
from rentmatch.schemas.rent_requests import (
    CreateRentRequestBody,
    OwnerRequestView,
    RentRequestOut,
    RespondBody,
    TenantRequestView,
)
from rentmatch.services.request_service import RentRequestService

router = APIRouter(tags=["Rent requests"])

ServiceDep = Annotated[RentRequestService, Depends(get_request_service)]


@router.post(
    "/requests",
    response_model=RentRequestOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_rent_request(
    body: CreateRentRequestBody,
    service: ServiceDep,
    principal: Annotated[Principal | None, Depends(require_roles("owner"))],
) -> RentRequestOut:
    """Send a rent request from an owner to a tenant.

    Denied with 429 while the pair is cooling down or the owner already has
    the maximum number of active pending requests; ``error.details`` then
    carries ``hours_remaining`` and ``next_available_at``.
    """
    ensure_self(principal, body.owner_id)
    record = service.create_request(body.owner_id, body.tenant_id)
    return RentRequestOut.from_record(record)


@router.get("/owners/{owner_id}/requests", response_model=list[OwnerRequestView])
async def list_owner_requests(
    owner_id: str,
    service: ServiceDep,
    principal: Annotated[Principal | None, Depends(require_roles("owner", "admin"))],
) -> list[OwnerRequestView]:
    """Owner dashboard. Expired requests are not listed."""
    ensure_self(principal, owner_id)
    return service.list_for_owner(owner_id)


@router.get("/tenants/{tenant_id}/requests", response_model=list[TenantRequestView])
async def list_tenant_requests(
    tenant_id: str,
    service: ServiceDep,
    principal: Annotated[Principal | None, Depends(require_roles("tenant", "admin"))],
) -> list[TenantRequestView]:
    """Tenant dashboard, including expired requests.

    Owner contact details are only filled in for accepted requests.
    """
    ensure_self(principal, tenant_id)
    return service.list_for_tenant(tenant_id)


@router.put("/requests/{request_id}/status", response_model=RentRequestOut)
async def respond_to_request(
    request_id: str,
    body: RespondBody,
    service: ServiceDep,
    principal: Annotated[Principal | None, Depends(require_roles("tenant"))],
) -> RentRequestOut:
    record = service.respond(
        request_id,
        body.status,
        acting_tenant_id=principal.id if principal is not None else None,
    )
    return RentRequestOut.from_record(record)
