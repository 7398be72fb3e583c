"""Dashboard use cases."""
from __future__ import annotations

from datetime import timezone
from typing import List, Optional

from core.models.protection_status import ProtectionStatus
from core.models.subscription import SubscriptionPlan, UserSubscription
from core.models.threat_log import ThreatLog
from core.settings import settings
from core.time import utc_start_of_day
from features.dashboard.application.dto import (
    DashboardStats,
    ProtectionToggleInput,
    SubscriptionCreateInput,
    SubscriptionUpdateInput,
    ThreatLogCreateInput,
)
from features.dashboard.domain.entities import (
    DEFAULT_PROTECTION,
    HEAD_TOGGLE_FIELDS,
    SAMPLE_THREATS,
)
from features.dashboard.domain.exceptions import DashboardValidationError
from features.dashboard.domain.validators import sanitize_string
from features.dashboard.infrastructure.repositories import (
    PlanRepository,
    ProtectionStatusStore,
    SubscriptionStore,
    ThreatLogStore,
)
from features.ownership.domain.exceptions import OwnedRecordNotFoundError


class ListPlansUseCase:
    def __init__(self, repository: PlanRepository | None = None):
        self.repository = repository or PlanRepository()

    def execute(self) -> List[SubscriptionPlan]:
        return self.repository.list_all()


class GetSubscriptionUseCase:
    def __init__(self, store: SubscriptionStore | None = None):
        self.store = store or SubscriptionStore()

    def execute(self, owner_id: str) -> Optional[UserSubscription]:
        return self.store.get_owned(owner_id)


class CreateSubscriptionUseCase:
    """Create the caller's subscription.

    The duplicate check is left to the unique constraint; a second create
    surfaces as :class:`OwnedRecordConflictError`.
    """

    def __init__(
        self,
        store: SubscriptionStore | None = None,
        plans: PlanRepository | None = None,
    ):
        self.store = store or SubscriptionStore()
        self.plans = plans or PlanRepository()

    def execute(self, owner_id: str, payload: SubscriptionCreateInput) -> UserSubscription:
        if self.plans.find_by_id(payload.plan_id) is None:
            raise DashboardValidationError("Invalid subscription plan", field="planId")

        return self.store.create_owned(
            owner_id,
            {
                "plan_id": payload.plan_id,
                "billing_cycle": payload.billing_cycle,
                "status": "active",
            },
        )


class UpdateSubscriptionUseCase:
    def __init__(self, store: SubscriptionStore | None = None):
        self.store = store or SubscriptionStore()

    def execute(self, owner_id: str, payload: SubscriptionUpdateInput) -> UserSubscription:
        updated = self.store.update_owned(owner_id, payload.as_patch())
        if updated is None:
            raise OwnedRecordNotFoundError(self.store.kind)
        return updated


class CancelSubscriptionUseCase:
    def __init__(self, store: SubscriptionStore | None = None):
        self.store = store or SubscriptionStore()

    def execute(self, owner_id: str) -> UserSubscription:
        cancelled = self.store.update_owned(owner_id, {"status": "cancelled"})
        if cancelled is None:
            raise OwnedRecordNotFoundError(self.store.kind)
        return cancelled


def provision_user_defaults(
    owner_id: str,
    *,
    protection: ProtectionStatusStore | None = None,
    threats: ThreatLogStore | None = None,
    include_samples: bool | None = None,
) -> ProtectionStatus:
    """Create the owner's protection row (and demo threats) on first access."""

    protection = protection or ProtectionStatusStore()
    status, created = protection.get_or_create_owned(owner_id, DEFAULT_PROTECTION)
    if not created:
        return status

    if include_samples is None:
        include_samples = settings.provision_sample_threats
    if include_samples:
        threats = threats or ThreatLogStore()
        for sample in SAMPLE_THREATS:
            threats.create_owned(owner_id, sample)
    return status


class GetProtectionStatusUseCase:
    def __init__(
        self,
        store: ProtectionStatusStore | None = None,
        threats: ThreatLogStore | None = None,
    ):
        self.store = store or ProtectionStatusStore()
        self.threats = threats or ThreatLogStore()

    def execute(self, owner_id: str) -> ProtectionStatus:
        return provision_user_defaults(owner_id, protection=self.store, threats=self.threats)


class ToggleProtectionUseCase:
    def __init__(
        self,
        store: ProtectionStatusStore | None = None,
        threats: ThreatLogStore | None = None,
    ):
        self.store = store or ProtectionStatusStore()
        self.threats = threats or ThreatLogStore()

    def execute(self, owner_id: str, payload: ProtectionToggleInput) -> ProtectionStatus:
        field = HEAD_TOGGLE_FIELDS.get(payload.head_type)
        if field is None:
            raise DashboardValidationError("Unknown protection head", field="headType")

        provision_user_defaults(owner_id, protection=self.store, threats=self.threats)
        updated = self.store.update_owned(owner_id, {field: bool(payload.enabled)})
        if updated is None:
            raise OwnedRecordNotFoundError(self.store.kind)
        return updated


class ListThreatLogsUseCase:
    def __init__(self, store: ThreatLogStore | None = None):
        self.store = store or ThreatLogStore()

    def execute(self, owner_id: str) -> List[ThreatLog]:
        return self.store.list_owned(owner_id)


class CreateThreatLogUseCase:
    def __init__(self, store: ThreatLogStore | None = None):
        self.store = store or ThreatLogStore()

    def execute(self, owner_id: str, payload: ThreatLogCreateInput) -> ThreatLog:
        values = {
            key: sanitize_string(value) if isinstance(value, str) else value
            for key, value in payload.details.items()
        }
        values.update(
            {
                "head_type": payload.head_type,
                "threat_level": payload.threat_level,
                "description": sanitize_string(payload.description),
                "status": payload.status or "detected",
            }
        )
        return self.store.create_owned(owner_id, values)


class UpdateThreatLogStatusUseCase:
    def __init__(self, store: ThreatLogStore | None = None):
        self.store = store or ThreatLogStore()

    def execute(self, owner_id: str, record_id: str, status: str) -> ThreatLog:
        updated = self.store.update_owned_by_id(record_id, owner_id, {"status": status})
        if updated is None:
            raise OwnedRecordNotFoundError(self.store.kind, record_id)
        return updated


_SCORE_PENALTY_PER_DISABLED_HEAD = 20
_SCORE_PENALTY_PER_OPEN_SEVERE_THREAT = 5
_SEVERE_LEVELS = frozenset({"high", "critical"})


class DashboardStatsUseCase:
    """Summarise the owner's threat history for the dashboard header."""

    def __init__(
        self,
        threats: ThreatLogStore | None = None,
        protection: ProtectionStatusStore | None = None,
    ):
        self.threats = threats or ThreatLogStore()
        self.protection = protection or ProtectionStatusStore()

    def execute(self, owner_id: str) -> DashboardStats:
        logs = self.threats.list_owned(owner_id)
        status = self.protection.get_owned(owner_id)

        today = utc_start_of_day()
        threats_today = 0
        for log in logs:
            detected_at = log.detected_at
            if detected_at is None:
                continue
            if detected_at.tzinfo is None:
                detected_at = detected_at.replace(tzinfo=timezone.utc)
            if detected_at >= today:
                threats_today += 1

        blocked = sum(1 for log in logs if log.status in ("blocked", "resolved"))

        score = 100
        if status is not None:
            disabled = sum(1 for field in HEAD_TOGGLE_FIELDS.values() if not getattr(status, field))
            score -= disabled * _SCORE_PENALTY_PER_DISABLED_HEAD
        open_severe = sum(
            1 for log in logs if log.status == "detected" and log.threat_level in _SEVERE_LEVELS
        )
        score -= open_severe * _SCORE_PENALTY_PER_OPEN_SEVERE_THREAT

        return DashboardStats(
            total_threats_blocked=blocked,
            threats_today=threats_today,
            last_scan=status.last_scan_at if status is not None else None,
            security_score=max(0, min(100, score)),
        )
