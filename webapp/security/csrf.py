"""Stateless anti-forgery tokens bound to a session identifier.

A token has the form ``"{issued_at_ms}:{signature}"`` where the signature is
``HMAC-SHA256(secret, f"{session_id}:{issued_at_ms}")`` rendered as hex.
Nothing is stored server-side: validity is recomputed from the session id,
the embedded timestamp and the process-wide secret.  A token therefore stays
valid until it expires unless the session id it is bound to goes away.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from enum import Enum
from typing import Callable, Final, Optional

from flask import current_app

from core.time import utc_now_millis

TOKEN_MAX_AGE_MS: Final[int] = 60 * 60 * 1000
TOKEN_MAX_CLOCK_SKEW_MS: Final[int] = 60 * 1000

_TIMESTAMP_RE: Final = re.compile(r"[0-9]{1,15}", re.ASCII)
_EXTENSION_KEY: Final[str] = "csrf_tokens"


class TokenCheck(str, Enum):
    """Outcome of a token inspection."""

    OK = "ok"
    MISSING = "missing"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    INVALID = "invalid"

    @property
    def ok(self) -> bool:
        return self is TokenCheck.OK


class CsrfTokenService:
    """Issue and verify signed, time-limited anti-forgery tokens."""

    def __init__(
        self,
        secret: str | bytes,
        *,
        max_age_ms: int = TOKEN_MAX_AGE_MS,
        max_clock_skew_ms: int = TOKEN_MAX_CLOCK_SKEW_MS,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        if not secret:
            raise ValueError("CSRF signing secret must not be empty")
        self._secret = bytes(secret)
        self._max_age_ms = int(max_age_ms)
        self._max_clock_skew_ms = max(0, int(max_clock_skew_ms))
        self._clock = clock or utc_now_millis

    @property
    def max_age_ms(self) -> int:
        return self._max_age_ms

    def _sign(self, session_id: str, timestamp: str) -> str:
        message = f"{session_id}:{timestamp}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def issue(self, session_id: str) -> str:
        """Return a fresh token for *session_id*."""

        if not isinstance(session_id, str) or not session_id:
            raise ValueError("session_id must be a non-empty string")
        timestamp = str(int(self._clock()))
        return f"{timestamp}:{self._sign(session_id, timestamp)}"

    def inspect(self, token: object, session_id: object) -> TokenCheck:
        """Classify *token* for *session_id* without raising."""

        if not isinstance(token, str) or not token:
            return TokenCheck.MISSING

        parts = token.split(":")
        if len(parts) != 2:
            return TokenCheck.MALFORMED
        timestamp, signature = parts
        if not _TIMESTAMP_RE.fullmatch(timestamp) or not signature:
            return TokenCheck.MALFORMED

        age = int(self._clock()) - int(timestamp)
        if age > self._max_age_ms:
            return TokenCheck.EXPIRED
        if age < -self._max_clock_skew_ms:
            return TokenCheck.INVALID

        if not isinstance(session_id, str) or not session_id:
            return TokenCheck.INVALID

        try:
            expected = self._sign(session_id, timestamp).encode("ascii")
            supplied = signature.encode("utf-8")
        except UnicodeEncodeError:
            return TokenCheck.INVALID

        if not hmac.compare_digest(supplied, expected):
            return TokenCheck.INVALID
        return TokenCheck.OK

    def validate(self, token: object, session_id: object) -> bool:
        """Return ``True`` only for a well-formed, unexpired token of *session_id*."""

        return self.inspect(token, session_id).ok


def init_csrf_tokens(app, service: Optional[CsrfTokenService] = None) -> CsrfTokenService:
    """Create the application's token service from configuration."""

    from core.settings import settings

    if service is None:
        with app.app_context():
            if settings.uses_default_secret and not settings.testing:
                app.logger.warning(
                    "CSRF tokens are signed with the default secret; set CSRF_SECRET_KEY or SECRET_KEY.",
                    extra={"event": "security.csrf.default_secret"},
                )
            service = CsrfTokenService(
                settings.csrf_secret_key,
                max_age_ms=settings.csrf_token_max_age_ms,
                max_clock_skew_ms=settings.csrf_token_max_clock_skew_ms,
            )
    app.extensions[_EXTENSION_KEY] = service
    return service


def get_csrf_service() -> CsrfTokenService:
    return current_app.extensions[_EXTENSION_KEY]


__all__ = [
    "CsrfTokenService",
    "TOKEN_MAX_AGE_MS",
    "TokenCheck",
    "get_csrf_service",
    "init_csrf_tokens",
]
