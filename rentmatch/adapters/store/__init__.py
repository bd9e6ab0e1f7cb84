"""Rent-request persistence adapters.

Services depend on ``AbstractRequestStore`` only, so the in-memory adapter
can be replaced by a document or SQL store without touching the core.
"""

from rentmatch.adapters.store.base import (
    AbstractRequestStore,
    RentRequest,
    RequestFilter,
    RequestStatus,
)
from rentmatch.adapters.store.in_memory import InMemoryRequestStore

__all__ = [
    "AbstractRequestStore",
    "InMemoryRequestStore",
    "RentRequest",
    "RequestFilter",
    "RequestStatus",
]
