"""Identity records mirrored from the external identity provider."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from flask_login import UserMixin
from sqlalchemy.orm import Mapped, mapped_column

from core.db import db


class User(UserMixin, db.Model):
    """Authenticated identity.

    ``id`` is the subject claim issued by the identity provider; it is the
    owner key stamped on every user-owned record.
    """

    __tablename__ = "user"

    id: Mapped[str] = mapped_column(db.String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(db.String(255), unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(db.String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(db.String(255), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(db.String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profileImageUrl": self.profile_image_url,
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<User {self.id}>"


__all__ = ["User"]
