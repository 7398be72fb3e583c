"""Per-user protection toggles."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Mapped, mapped_column

from core.db import db


class ProtectionStatus(db.Model):
    """Singleton row per user holding the three protection switches."""

    __tablename__ = "protection_status"

    id: Mapped[str] = mapped_column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        db.String(255),
        db.ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    deepfake_enabled: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=True)
    surveillance_enabled: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=True)
    containment_enabled: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=True)
    last_scan_at: Mapped[datetime | None] = mapped_column(
        db.DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
    )
    threats_blocked_today: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


__all__ = ["ProtectionStatus"]
