"""Owner-scoped SQLAlchemy data access.

Every statement built here carries the owner predicate.  Callers never get a
way to look a row up by its id alone, so a handler that forgets to compare
``user_id`` cannot leak or modify another user's record.
"""
from __future__ import annotations

from typing import Any, ClassVar, Generic, Iterable, Mapping, Optional, TypeVar

from sqlalchemy import and_, inspect as sa_inspect, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db import db
from core.time import utc_now
from features.ownership.domain.exceptions import OwnedRecordConflictError

ModelT = TypeVar("ModelT")

_UNIQUE_VIOLATION_PGCODE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return ``True`` when *exc* was caused by a UNIQUE constraint."""

    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == _UNIQUE_VIOLATION_PGCODE:
        return True
    if getattr(orig, "sqlstate", None) == _UNIQUE_VIOLATION_PGCODE:
        return True
    return "unique" in str(orig or exc).lower()


class OwnershipScopedStore(Generic[ModelT]):
    """Base store for records carrying an owner column.

    Subclasses set :attr:`model` and :attr:`kind` and may override the
    ``_prepare_*`` hooks to stamp server-side fields.
    """

    model: ClassVar[type]
    kind: ClassVar[str] = "record"
    owner_attr: ClassVar[str] = "user_id"
    singleton: ClassVar[bool] = False
    protected_fields: ClassVar[frozenset[str]] = frozenset({"id", "user_id"})
    server_managed_fields: ClassVar[frozenset[str]] = frozenset()
    touch_field: ClassVar[Optional[str]] = None

    def __init__(self, session: Optional[Session] = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else db.session

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def _owner_column(self):
        return getattr(self.model, self.owner_attr)

    @staticmethod
    def _require_owner(owner_id: Any) -> str:
        if not isinstance(owner_id, str) or not owner_id:
            raise ValueError("owner_id is required for owner-scoped access")
        return owner_id

    def _owned_predicate(self, owner_id: str, record_id: Optional[str] = None):
        clauses = [self._owner_column() == self._require_owner(owner_id)]
        if record_id is not None:
            clauses.append(self.model.id == record_id)
        return and_(*clauses)

    def _ordering(self) -> Iterable[Any]:
        return ()

    def _select_owned(self, predicate):
        return select(self.model).where(predicate).execution_options(populate_existing=True)

    # ------------------------------------------------------------------
    # Payload handling
    # ------------------------------------------------------------------
    def _column_names(self) -> frozenset[str]:
        return frozenset(attr.key for attr in sa_inspect(self.model).column_attrs)

    def _clean(self, payload: Optional[Mapping[str, Any]], *, drop: frozenset[str]) -> dict[str, Any]:
        columns = self._column_names()
        cleaned: dict[str, Any] = {}
        for key, value in (payload or {}).items():
            if key in drop:
                continue
            if key not in columns:
                raise ValueError(f"{self.kind} has no field '{key}'")
            cleaned[key] = value
        return cleaned

    def _prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        return values

    def _prepare_patch(self, values: dict[str, Any]) -> dict[str, Any]:
        return values

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_owned(self, owner_id: str) -> Optional[ModelT]:
        """Return the owner's record (the first one for multi-row kinds)."""

        stmt = self._select_owned(self._owned_predicate(owner_id)).order_by(*self._ordering())
        return self.session.scalars(stmt.limit(1)).first()

    def list_owned(self, owner_id: str) -> list[ModelT]:
        stmt = self._select_owned(self._owned_predicate(owner_id)).order_by(*self._ordering())
        return list(self.session.scalars(stmt))

    def get_owned_by_id(self, record_id: Optional[str], owner_id: str) -> Optional[ModelT]:
        """Return the record only when both id and owner match."""

        predicate = self._owned_predicate(owner_id, record_id or "")
        if not record_id:
            return None
        return self.session.scalars(self._select_owned(predicate)).first()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_owned(self, owner_id: str, payload: Optional[Mapping[str, Any]] = None) -> ModelT:
        """Insert a record stamped with *owner_id*.

        Raises :class:`OwnedRecordConflictError` when a unique constraint
        rejects the insert.
        """

        owner_id = self._require_owner(owner_id)
        values = self._prepare_create(
            self._clean(payload, drop=self.protected_fields | self.server_managed_fields)
        )
        record = self.model(**values)
        setattr(record, self.owner_attr, owner_id)
        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if is_unique_violation(exc):
                raise OwnedRecordConflictError(self.kind, owner_id) from exc
            raise
        return record

    def get_or_create_owned(
        self, owner_id: str, defaults: Optional[Mapping[str, Any]] = None
    ) -> tuple[ModelT, bool]:
        """Return the owner's record, creating it from *defaults* if missing.

        A concurrent create that wins the unique constraint is tolerated by
        re-reading the winner's row.
        """

        existing = self.get_owned(owner_id)
        if existing is not None:
            return existing, False
        try:
            return self.create_owned(owner_id, defaults), True
        except OwnedRecordConflictError:
            winner = self.get_owned(owner_id)
            if winner is None:
                raise
            return winner, False

    def update_owned_by_id(
        self, record_id: Optional[str], owner_id: str, patch: Optional[Mapping[str, Any]]
    ) -> Optional[ModelT]:
        """Apply *patch* when ``(id, owner)`` matches; ``None`` otherwise."""

        predicate = self._owned_predicate(owner_id, record_id or "")
        if not record_id:
            return None
        return self._conditional_update(predicate, patch)

    def update_owned(self, owner_id: str, patch: Optional[Mapping[str, Any]]) -> Optional[ModelT]:
        """Apply *patch* to the owner's singleton row; ``None`` if it is missing."""

        if not self.singleton:
            raise TypeError(f"{self.kind} is not one-per-owner; update by id instead")
        return self._conditional_update(self._owned_predicate(owner_id), patch)

    def _conditional_update(self, predicate, patch: Optional[Mapping[str, Any]]) -> Optional[ModelT]:
        values = self._prepare_patch(
            self._clean(patch, drop=self.protected_fields | self.server_managed_fields)
        )
        if self.touch_field:
            values[self.touch_field] = utc_now()
        if not values:
            return self.session.scalars(self._select_owned(predicate)).first()

        stmt = (
            update(self.model)
            .where(predicate)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            self.session.rollback()
            return None
        self.session.commit()
        return self.session.scalars(self._select_owned(predicate)).first()


__all__ = ["OwnershipScopedStore", "is_unique_violation"]
