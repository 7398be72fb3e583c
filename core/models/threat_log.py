"""Threat log entries recorded for each user."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Mapped, mapped_column

from core.db import db


class ThreatLog(db.Model):
    __tablename__ = "threat_log"

    id: Mapped[str] = mapped_column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        db.String(255),
        db.ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    head_type: Mapped[str] = mapped_column(db.String(32), nullable=False)
    threat_level: Mapped[str] = mapped_column(db.String(16), nullable=False)
    description: Mapped[str] = mapped_column(db.Text, nullable=False)
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default="detected")
    source: Mapped[str | None] = mapped_column(db.String(255), nullable=True)
    source_type: Mapped[str | None] = mapped_column(db.String(32), nullable=True)
    blocked_content: Mapped[str | None] = mapped_column(db.Text, nullable=True)
    reason: Mapped[str | None] = mapped_column(db.Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(db.String(64), nullable=True)
    action_taken: Mapped[str | None] = mapped_column(db.Text, nullable=True)
    detected_at: Mapped[datetime] = mapped_column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    resolved_at: Mapped[datetime | None] = mapped_column(db.DateTime(timezone=True), nullable=True)


__all__ = ["ThreatLog"]
