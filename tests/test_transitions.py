"""Tests for tenant decisions and the deactivation cascade."""

from datetime import datetime, timezone

import pytest

from rentmatch.adapters.store.base import RentRequest, RequestStatus
from rentmatch.adapters.store.in_memory import InMemoryRequestStore
from rentmatch.core.errors import (
    InvalidStatusError,
    NotFoundError,
    PermissionAppError,
    RequestAlreadyResolvedError,
)
from rentmatch.services.transitions import cascade_deactivate, parse_decision, set_status

NOW = datetime(2024, 5, 20, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> InMemoryRequestStore:
    store = InMemoryRequestStore()
    for request_id, tenant, status in [
        ("p1", "T1", RequestStatus.PENDING),
        ("a1", "T1", RequestStatus.ACCEPTED),
        ("r1", "T1", RequestStatus.REJECTED),
        ("e1", "T1", RequestStatus.EXPIRED),
        ("p2", "T2", RequestStatus.PENDING),
    ]:
        store.insert(
            RentRequest(id=request_id, owner_id="O1", tenant_id=tenant, status=status, created_at=NOW)
        )
    return store


class TestParseDecision:
    @pytest.mark.parametrize("value", ["Accepted", "Rejected", RequestStatus.ACCEPTED])
    def test_accepts_decisions(self, value) -> None:
        assert parse_decision(value) in {RequestStatus.ACCEPTED, RequestStatus.REJECTED}

    @pytest.mark.parametrize("value", ["Pending", "Expired", "ACCEPTED", "yes", RequestStatus.PENDING])
    def test_rejects_everything_else(self, value) -> None:
        with pytest.raises(InvalidStatusError) as exc_info:
            parse_decision(value)

        assert exc_info.value.details["allowed"] == ["Accepted", "Rejected"]


class TestSetStatus:
    def test_pending_to_rejected(self, store) -> None:
        updated = set_status(store, "p1", "Rejected", acting_tenant_id="T1")

        assert updated.status is RequestStatus.REJECTED
        assert store.get("p1").status is RequestStatus.REJECTED

    def test_validates_status_before_lookup(self, store) -> None:
        with pytest.raises(InvalidStatusError):
            set_status(store, "missing", "Pending", acting_tenant_id=None)

    def test_missing_request(self, store) -> None:
        with pytest.raises(NotFoundError):
            set_status(store, "missing", "Accepted", acting_tenant_id=None)

    def test_other_tenant_is_forbidden(self, store) -> None:
        with pytest.raises(PermissionAppError) as exc_info:
            set_status(store, "p1", "Accepted", acting_tenant_id="T2")

        assert exc_info.value.code == "not_request_tenant"
        assert store.get("p1").status is RequestStatus.PENDING

    @pytest.mark.parametrize("request_id", ["a1", "r1", "e1"])
    def test_no_transition_out_of_resolved(self, store, request_id) -> None:
        before = store.get(request_id).status

        with pytest.raises(RequestAlreadyResolvedError):
            set_status(store, request_id, "Rejected", acting_tenant_id="T1")

        assert store.get(request_id).status is before


class TestCascade:
    def test_rejects_pending_and_accepted(self, store) -> None:
        assert cascade_deactivate(store, "T1") == 2

        assert store.get("p1").status is RequestStatus.REJECTED
        assert store.get("a1").status is RequestStatus.REJECTED
        assert store.get("e1").status is RequestStatus.EXPIRED
        assert store.get("p2").status is RequestStatus.PENDING

    def test_repeat_is_a_no_op(self, store) -> None:
        cascade_deactivate(store, "T1")

        assert cascade_deactivate(store, "T1") == 0

    def test_unknown_tenant(self, store) -> None:
        assert cascade_deactivate(store, "T9") == 0
