"""Subscription catalog and per-user subscription models."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Mapped, mapped_column

from core.db import db


def _uuid() -> str:
    return str(uuid.uuid4())


class SubscriptionPlan(db.Model):
    """Public pricing plan."""

    __tablename__ = "subscription_plan"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(db.String(120), nullable=False)
    tier: Mapped[str] = mapped_column(db.String(32), nullable=False)  # basic / pro / enterprise
    price_monthly: Mapped[int] = mapped_column(db.Integer, nullable=False)
    price_yearly: Mapped[int] = mapped_column(db.Integer, nullable=False)
    features: Mapped[list] = mapped_column(db.JSON, nullable=False, default=list)
    max_devices: Mapped[int] = mapped_column(db.Integer, nullable=False)
    is_popular: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)


class UserSubscription(db.Model):
    """A user's plan selection.

    One row per user: the unique constraint on ``user_id`` is what rejects a
    second concurrent create, not an application-level check.
    """

    __tablename__ = "user_subscription"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        db.String(255),
        db.ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    plan_id: Mapped[str] = mapped_column(
        db.String(36),
        db.ForeignKey("subscription_plan.id"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default="active")
    billing_cycle: Mapped[str] = mapped_column(db.String(16), nullable=False, default="monthly")
    start_date: Mapped[datetime] = mapped_column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    end_date: Mapped[datetime | None] = mapped_column(db.DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


__all__ = ["SubscriptionPlan", "UserSubscription"]
