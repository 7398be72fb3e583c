"""JSON representations of dashboard records."""

from __future__ import annotations

from typing import Any, Dict

from core.models.protection_status import ProtectionStatus
from core.models.subscription import SubscriptionPlan, UserSubscription
from core.models.threat_log import ThreatLog
from core.time import isoformat_z
from features.dashboard.application.dto import DashboardStats


def serialize_plan(plan: SubscriptionPlan) -> Dict[str, Any]:
    return {
        "id": plan.id,
        "name": plan.name,
        "tier": plan.tier,
        "priceMonthly": plan.price_monthly,
        "priceYearly": plan.price_yearly,
        "features": list(plan.features or []),
        "isPopular": bool(plan.is_popular),
    }


def serialize_subscription(subscription: UserSubscription) -> Dict[str, Any]:
    return {
        "id": subscription.id,
        "userId": subscription.user_id,
        "planId": subscription.plan_id,
        "status": subscription.status,
        "billingCycle": subscription.billing_cycle,
        "startDate": isoformat_z(subscription.start_date),
        "endDate": isoformat_z(subscription.end_date),
        "createdAt": isoformat_z(subscription.created_at),
    }


def serialize_protection(status: ProtectionStatus) -> Dict[str, Any]:
    return {
        "id": status.id,
        "userId": status.user_id,
        "deepfakeEnabled": status.deepfake_enabled,
        "surveillanceEnabled": status.surveillance_enabled,
        "containmentEnabled": status.containment_enabled,
        "lastScanAt": isoformat_z(status.last_scan_at),
        "threatsBlockedToday": status.threats_blocked_today,
        "updatedAt": isoformat_z(status.updated_at),
    }


def serialize_threat_log(log: ThreatLog) -> Dict[str, Any]:
    return {
        "id": log.id,
        "userId": log.user_id,
        "headType": log.head_type,
        "threatLevel": log.threat_level,
        "description": log.description,
        "status": log.status,
        "source": log.source,
        "sourceType": log.source_type,
        "blockedContent": log.blocked_content,
        "reason": log.reason,
        "ipAddress": log.ip_address,
        "actionTaken": log.action_taken,
        "detectedAt": isoformat_z(log.detected_at),
        "resolvedAt": isoformat_z(log.resolved_at),
    }


def serialize_stats(stats: DashboardStats) -> Dict[str, Any]:
    return {
        "totalThreatsBlocked": stats.total_threats_blocked,
        "threatsToday": stats.threats_today,
        "lastScan": isoformat_z(stats.last_scan),
        "securityScore": stats.security_score,
    }
