"""Dashboard stores built on :class:`OwnershipScopedStore`."""
from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import func, select

from core.db import db
from core.models.protection_status import ProtectionStatus
from core.models.subscription import SubscriptionPlan, UserSubscription
from core.models.threat_log import ThreatLog
from core.time import utc_now
from features.dashboard.domain.entities import (
    DEFAULT_PLANS,
    RESOLVED_STATUS,
    TERMINAL_SUBSCRIPTION_STATUSES,
)
from features.ownership.infrastructure.store import OwnershipScopedStore


class SubscriptionStore(OwnershipScopedStore[UserSubscription]):
    """One subscription per user; cancellation is a status change."""

    model = UserSubscription
    kind = "subscription"
    singleton = True
    server_managed_fields = frozenset({"created_at", "start_date", "end_date"})

    def _prepare_patch(self, values: dict[str, Any]) -> dict[str, Any]:
        status = values.get("status")
        if status in TERMINAL_SUBSCRIPTION_STATUSES:
            values["end_date"] = utc_now()
        elif status is not None:
            values["end_date"] = None
        return values


class ThreatLogStore(OwnershipScopedStore[ThreatLog]):
    model = ThreatLog
    kind = "threat log"
    server_managed_fields = frozenset({"detected_at", "resolved_at"})

    def _ordering(self):
        return (ThreatLog.detected_at.desc(), ThreatLog.id)

    @staticmethod
    def _stamp_resolution(values: dict[str, Any]) -> dict[str, Any]:
        if "status" in values:
            values["resolved_at"] = utc_now() if values["status"] == RESOLVED_STATUS else None
        return values

    def _prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        return self._stamp_resolution(values)

    def _prepare_patch(self, values: dict[str, Any]) -> dict[str, Any]:
        return self._stamp_resolution(values)


class ProtectionStatusStore(OwnershipScopedStore[ProtectionStatus]):
    model = ProtectionStatus
    kind = "protection status"
    singleton = True
    server_managed_fields = frozenset({"updated_at"})
    touch_field = "updated_at"


class PlanRepository:
    """Read access to the public plan catalog."""

    def list_all(self) -> List[SubscriptionPlan]:
        stmt = select(SubscriptionPlan).order_by(SubscriptionPlan.price_monthly.asc())
        return list(db.session.scalars(stmt))

    def find_by_id(self, plan_id: str) -> Optional[SubscriptionPlan]:
        return db.session.get(SubscriptionPlan, plan_id)

    def count(self) -> int:
        return db.session.scalar(select(func.count()).select_from(SubscriptionPlan)) or 0

    def seed_defaults(self, *, force: bool = False) -> int:
        """Insert the default plans when the catalog is empty.

        With ``force`` every default tier missing from a non-empty catalog is
        added; existing rows are left alone because subscriptions reference
        them.
        """

        if self.count() and not force:
            return 0
        existing = set(db.session.scalars(select(SubscriptionPlan.tier)))
        missing = [plan for plan in DEFAULT_PLANS if plan["tier"] not in existing]
        for plan in missing:
            db.session.add(SubscriptionPlan(**plan))
        db.session.commit()
        return len(missing)


__all__ = [
    "PlanRepository",
    "ProtectionStatusStore",
    "SubscriptionStore",
    "ThreatLogStore",
]
