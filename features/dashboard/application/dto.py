"""Dashboard application layer DTOs."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class SubscriptionCreateInput:
    plan_id: str
    billing_cycle: str


@dataclass(slots=True)
class SubscriptionUpdateInput:
    status: Optional[str] = None
    billing_cycle: Optional[str] = None

    def as_patch(self) -> dict:
        patch = {}
        if self.status is not None:
            patch["status"] = self.status
        if self.billing_cycle is not None:
            patch["billing_cycle"] = self.billing_cycle
        return patch


@dataclass(slots=True)
class ProtectionToggleInput:
    head_type: str
    enabled: bool


@dataclass(slots=True)
class ThreatLogCreateInput:
    head_type: str
    threat_level: str
    description: str
    status: str = "detected"
    details: dict = field(default_factory=dict)


@dataclass(slots=True)
class DashboardStats:
    total_threats_blocked: int
    threats_today: int
    last_scan: Optional[datetime]
    security_score: int
