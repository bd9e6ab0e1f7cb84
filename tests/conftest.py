"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any ``rentmatch`` import so the global
settings object picks them up.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("AUTH_REQUIRED", "true")
os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
import pytest
from fastapi.testclient import TestClient

from rentmatch.adapters.directory.base import Owner, Tenant
from rentmatch.adapters.directory.in_memory import InMemoryParticipantDirectory
from rentmatch.adapters.store.in_memory import InMemoryRequestStore
from rentmatch.api.deps import get_request_service
from rentmatch.services.request_service import RentRequestService
from rentmatch.utils.identifiers import normalize_participant_id

START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

OWNER_ID = normalize_participant_id("owner", "+91 90000 00001")
OTHER_OWNER_ID = normalize_participant_id("owner", "+91 90000 00002")
TENANT_IDS = [normalize_participant_id("tenant", f"+91 80000 0000{i}") for i in range(1, 5)]


class FakeClock:
    """Deterministic clock returning timezone-aware datetimes."""

    def __init__(self, start: datetime = START) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def owner_id() -> str:
    return OWNER_ID


@pytest.fixture
def other_owner_id() -> str:
    return OTHER_OWNER_ID


@pytest.fixture
def tenant_ids() -> list[str]:
    return list(TENANT_IDS)


@pytest.fixture
def store() -> InMemoryRequestStore:
    return InMemoryRequestStore()


@pytest.fixture
def directory() -> InMemoryParticipantDirectory:
    directory = InMemoryParticipantDirectory()
    directory.add_owner(
        Owner(
            id=OWNER_ID,
            name="Ramesh Kumar",
            whatsapp="+91 90000 00001",
            address="12 Station Road",
            created_at=START,
        )
    )
    directory.add_owner(
        Owner(
            id=OTHER_OWNER_ID,
            name="Sita Devi",
            whatsapp="+91 90000 00002",
            address="4 Lake View",
            created_at=START,
        )
    )
    for i, tenant_id in enumerate(TENANT_IDS, start=1):
        directory.add_tenant(
            Tenant(
                id=tenant_id,
                name=f"Tenant {i}",
                mobile=f"+91 80000 0000{i}",
                area="Old City",
                cast="General",
                total_family_members=i + 1,
                created_at=START,
            )
        )
    return directory


@pytest.fixture
def service(
    store: InMemoryRequestStore,
    directory: InMemoryParticipantDirectory,
    clock: FakeClock,
) -> RentRequestService:
    return RentRequestService(store, directory, clock=clock)


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Mint a token the way the account service does."""

    def _make(user_id: str, role: str, *, secret: str | None = None, expires_in: int = 3600) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "user": {"id": user_id, "role": role},
            "iat": now,
            "exp": now + timedelta(seconds=expires_in),
        }
        return jwt.encode(claims, secret or os.environ["AUTH_JWT_SECRET"], algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> Callable[[str, str], dict[str, str]]:
    def _headers(user_id: str, role: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id, role)}"}

    return _headers


@pytest.fixture
def client(service: RentRequestService):
    """Test client bound to the fixture service (fresh store per test)."""
    from rentmatch.main import app

    app.dependency_overrides[get_request_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
