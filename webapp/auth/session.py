from __future__ import annotations

import secrets
from typing import Optional

from flask import current_app, session
from flask_login import login_user, logout_user

from core.models.user import User

from . import SESSION_ID_KEY


def current_session_id(*, create: bool = False) -> Optional[str]:
    """Return the identifier anti-forgery tokens are bound to.

    With ``create`` a new identifier is stored when the session has none.
    """

    value = session.get(SESSION_ID_KEY)
    if isinstance(value, str) and value:
        return value
    if not create:
        return None
    return rotate_session_id()


def rotate_session_id() -> str:
    """Replace the session identifier, invalidating every token issued for it."""

    value = secrets.token_urlsafe(32)
    session[SESSION_ID_KEY] = value
    return value


def start_session(user: User) -> str:
    """Sign *user* in on a fresh session and return its new identifier."""

    session.clear()
    login_user(user)
    session.permanent = True
    current_app.logger.info(
        "Session started",
        extra={"event": "auth.session.start", "user_id": user.id},
    )
    return rotate_session_id()


def end_session() -> None:
    """Sign out and drop everything stored in the session."""

    logout_user()
    session.clear()
