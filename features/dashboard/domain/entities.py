"""Dashboard vocabulary shared by the application and API layers."""
from __future__ import annotations

from typing import Final

HEAD_TYPES: Final[tuple[str, ...]] = ("deepfake", "surveillance", "containment")
THREAT_LEVELS: Final[tuple[str, ...]] = ("low", "medium", "high", "critical")
THREAT_STATUSES: Final[tuple[str, ...]] = ("detected", "blocked", "resolved")
THREAT_SOURCE_TYPES: Final[tuple[str, ...]] = ("website", "email", "application", "network", "file")
SUBSCRIPTION_STATUSES: Final[tuple[str, ...]] = ("active", "cancelled", "expired")
BILLING_CYCLES: Final[tuple[str, ...]] = ("monthly", "yearly")
PLAN_TIERS: Final[tuple[str, ...]] = ("basic", "pro", "enterprise")

RESOLVED_STATUS: Final[str] = "resolved"
TERMINAL_SUBSCRIPTION_STATUSES: Final[frozenset[str]] = frozenset({"cancelled", "expired"})

# headType -> ProtectionStatus column
HEAD_TOGGLE_FIELDS: Final[dict[str, str]] = {
    "deepfake": "deepfake_enabled",
    "surveillance": "surveillance_enabled",
    "containment": "containment_enabled",
}

DEFAULT_PROTECTION: Final[dict[str, object]] = {
    "deepfake_enabled": True,
    "surveillance_enabled": True,
    "containment_enabled": True,
    "threats_blocked_today": 0,
}

DEFAULT_PLANS: Final[tuple[dict[str, object], ...]] = (
    {
        "name": "Basic",
        "tier": "basic",
        "price_monthly": 9,
        "price_yearly": 89,
        "features": [
            "AI Deepfake Detection (Limited)",
            "Basic Surveillance Monitoring",
            "Email Threat Alerts",
            "Community Support",
        ],
        "max_devices": 3,
        "is_popular": False,
    },
    {
        "name": "Pro",
        "tier": "pro",
        "price_monthly": 29,
        "price_yearly": 279,
        "features": [
            "Full AI Deepfake Detection",
            "Advanced Surveillance Monitoring",
            "Real-time Threat Alerts",
            "Priority Support",
            "Adaptive Threat Containment",
            "Real-time Response",
        ],
        "max_devices": 10,
        "is_popular": True,
    },
    {
        "name": "Enterprise",
        "tier": "enterprise",
        "price_monthly": 99,
        "price_yearly": 990,
        "features": [
            "Full AI Deepfake Detection",
            "Enterprise Surveillance Suite",
            "Custom Alert Configuration",
            "24/7 Dedicated Support",
            "Advanced Threat Containment",
            "Instant Real-time Response",
            "Full API Access",
            "Dedicated Account Manager",
        ],
        "max_devices": 100,
        "is_popular": False,
    },
)

SAMPLE_THREATS: Final[tuple[dict[str, str], ...]] = (
    {
        "head_type": "deepfake",
        "threat_level": "medium",
        "description": "Potential deepfake video detected in incoming email attachment",
        "status": "blocked",
    },
    {
        "head_type": "surveillance",
        "threat_level": "low",
        "description": "Third-party tracker blocked on visited website",
        "status": "blocked",
    },
    {
        "head_type": "containment",
        "threat_level": "high",
        "description": "Suspicious network activity contained and isolated",
        "status": "resolved",
    },
    {
        "head_type": "deepfake",
        "threat_level": "low",
        "description": "AI-generated image detected in social media feed",
        "status": "blocked",
    },
    {
        "head_type": "surveillance",
        "threat_level": "medium",
        "description": "Facial recognition attempt blocked from unknown source",
        "status": "blocked",
    },
)
