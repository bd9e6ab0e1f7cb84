"""Pydantic schemas for rent-request payloads and views."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rentmatch.adapters.store.base import RentRequest, RequestStatus


class CreateRentRequestBody(BaseModel):
    """Owner's request to contact a tenant."""

    owner_id: str = Field(..., min_length=1, description="Requesting owner id.")
    tenant_id: str = Field(..., min_length=1, description="Tenant being requested.")


class RespondBody(BaseModel):
    status: str = Field(
        ...,
        description="Tenant decision: 'Accepted' or 'Rejected'.",
        examples=["Accepted"],
    )


class TenantActiveBody(BaseModel):
    is_active: bool = Field(..., description="False withdraws the tenant from the market.")


class RentRequestOut(BaseModel):
    """A rent request as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    tenant_id: str
    status: RequestStatus
    created_at: datetime

    @classmethod
    def from_record(cls, record: RentRequest) -> "RentRequestOut":
        return cls.model_validate(record)


class OwnerRequestView(BaseModel):
    """A request on the owner's dashboard, with tenant display fields.

    Dangling tenant references show as "Unknown" with empty details.
    """

    id: str
    tenant_id: str
    tenant_name: str = "Unknown"
    tenant_mobile: str = ""
    tenant_area: str = ""
    tenant_cast: str = ""
    tenant_total_family_members: int = 0
    status: RequestStatus
    created_at: datetime


class TenantRequestView(BaseModel):
    """A request on the tenant's dashboard.

    Owner contact fields stay null unless the request is Accepted.
    """

    id: str
    owner_id: str
    owner_name: str = "Unknown"
    owner_whatsapp: str | None = None
    owner_address: str | None = None
    status: RequestStatus
    created_at: datetime


class TenantActiveResponse(BaseModel):
    tenant_id: str
    is_active: bool
    rejected_requests: int = Field(
        0,
        description="Live requests rejected because the tenant was deactivated.",
    )

