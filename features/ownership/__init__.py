"""Owner-scoped data access for user-owned records."""

from .domain.exceptions import (
    OwnedRecordConflictError,
    OwnedRecordError,
    OwnedRecordNotFoundError,
)
from .infrastructure.store import OwnershipScopedStore

__all__ = [
    "OwnedRecordConflictError",
    "OwnedRecordError",
    "OwnedRecordNotFoundError",
    "OwnershipScopedStore",
]
