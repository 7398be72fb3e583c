"""Browser session handling for signed-in users.

Sign-in is delegated to an external identity provider; this package only
binds the resulting user to the Flask session and manages the per-session
identifier that anti-forgery tokens are bound to.
"""

SESSION_ID_KEY = "_csrf_sid"

from .session import current_session_id, end_session, rotate_session_id, start_session  # noqa: E402

__all__ = [
    "SESSION_ID_KEY",
    "current_session_id",
    "end_session",
    "rotate_session_id",
    "start_session",
]
