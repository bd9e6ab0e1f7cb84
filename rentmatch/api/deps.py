"""FastAPI dependencies wiring the rent-request service.

The store and directory are process-wide singletons so state survives
across requests. Tests replace ``get_request_service`` through
``app.dependency_overrides``.
"""

from __future__ import annotations

from rentmatch.adapters.directory.base import AbstractParticipantDirectory
from rentmatch.adapters.directory.in_memory import InMemoryParticipantDirectory
from rentmatch.adapters.store.base import AbstractRequestStore
from rentmatch.adapters.store.in_memory import InMemoryRequestStore
from rentmatch.core.config import settings
from rentmatch.services.request_service import RentRequestService

_store: AbstractRequestStore | None = None
_directory: AbstractParticipantDirectory | None = None


def get_request_store() -> AbstractRequestStore:
    global _store
    if _store is None:
        _store = InMemoryRequestStore()
    return _store


def get_participant_directory() -> AbstractParticipantDirectory:
    global _directory
    if _directory is None:
        _directory = InMemoryParticipantDirectory()
    return _directory


def get_request_service() -> RentRequestService:
    """Build the service around the shared adapters.

    Policy is read from settings on every call, so configuration patched in
    tests takes effect without a restart.
    """

    return RentRequestService.from_settings(
        get_request_store(),
        get_participant_directory(),
        settings.requests,
    )
