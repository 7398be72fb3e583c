"""ORM models shared across applications."""

# Import every model here so metadata is complete before create_all/migrate.
from .user import User
from .subscription import SubscriptionPlan, UserSubscription
from .threat_log import ThreatLog
from .protection_status import ProtectionStatus

__all__ = [
    "User",
    "SubscriptionPlan",
    "UserSubscription",
    "ThreatLog",
    "ProtectionStatus",
]
