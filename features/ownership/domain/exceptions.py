"""Exceptions raised by owner-scoped data access."""


class OwnedRecordError(Exception):
    """Base class for owner-scoped store failures."""


class OwnedRecordNotFoundError(OwnedRecordError):
    """No row matched the combined (id, owner) predicate.

    Raised by callers that prefer an exception over a ``None`` result. A row
    that exists but belongs to someone else is reported the same way.
    """

    def __init__(self, kind: str, record_id: str | None = None):
        label = f"{kind} #{record_id}" if record_id else kind
        super().__init__(f"{label} not found")
        self.kind = kind
        self.record_id = record_id


class OwnedRecordConflictError(OwnedRecordError):
    """A singleton-per-owner record already exists for this owner."""

    def __init__(self, kind: str, owner_id: str):
        super().__init__(f"{kind} already exists for owner")
        self.kind = kind
        self.owner_id = owner_id
