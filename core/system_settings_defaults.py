"""Default payloads for application configuration."""
from __future__ import annotations

DEFAULT_APPLICATION_SETTINGS: dict[str, object] = {
    "SECRET_KEY": "default-secret-key",
    # Falls back to SECRET_KEY when left empty.
    "CSRF_SECRET_KEY": "",
    "CSRF_TOKEN_MAX_AGE_MS": 60 * 60 * 1000,
    "CSRF_TOKEN_MAX_CLOCK_SKEW_MS": 60 * 1000,
    "SESSION_COOKIE_SECURE": False,
    "SESSION_COOKIE_HTTPONLY": True,
    "SESSION_COOKIE_SAMESITE": "Lax",
    "PERMANENT_SESSION_LIFETIME": 7 * 24 * 60 * 60,
    "MAX_CONTENT_LENGTH": 10 * 1024,
    "LANGUAGES": ["en", "ja"],
    "BABEL_DEFAULT_LOCALE": "en",
    "BABEL_DEFAULT_TIMEZONE": "UTC",
    "AUDIT_LOG_CAPACITY": 1000,
    "PROVISION_SAMPLE_THREATS": True,
    "RATE_LIMIT_API_MAX_REQUESTS": 100,
    "RATE_LIMIT_API_WINDOW_SECONDS": 15 * 60,
    "RATE_LIMIT_SENSITIVE_MAX_REQUESTS": 5,
    "RATE_LIMIT_SENSITIVE_WINDOW_SECONDS": 60,
    "ALLOWED_REDIRECT_HOSTS": ["localhost", "127.0.0.1"],
    "HSTS_MAX_AGE_SECONDS": 31536000,
}

__all__ = [
    "DEFAULT_APPLICATION_SETTINGS",
]
