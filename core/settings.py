"""Centralised application settings abstraction.

This module exposes :class:`ApplicationSettings` which consolidates all
configuration lookups that would otherwise rely on ad-hoc ``os.environ``
access throughout the codebase.  Values are resolved from the active Flask
application's config first, then from the process environment (or any
mapping provided), and finally from :data:`DEFAULT_APPLICATION_SETTINGS`.

The global :data:`settings` instance should be used for production code, while
tests can instantiate their own :class:`ApplicationSettings` with a dedicated
mapping to validate behaviour in isolation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, TYPE_CHECKING, cast

from flask import current_app, has_app_context

from core.system_settings_defaults import DEFAULT_APPLICATION_SETTINGS

if TYPE_CHECKING:  # pragma: no cover
    from flask import Flask


@dataclass(frozen=True)
class _EnvironmentFacade:
    """Thin wrapper that provides ``Mapping`` compatible access to env vars."""

    source: Mapping[str, str]

    @classmethod
    def from_environ(cls, env: Optional[Mapping[str, str]] = None) -> "_EnvironmentFacade":
        return cls(source=os.environ if env is None else env)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.source.get(key, default)


@dataclass(frozen=True)
class RateLimitSettings:
    """Request budget for one rate limiter."""

    max_requests: int
    window_seconds: int


class ApplicationSettings:
    """Typed accessors over Flask config, environment and defaults."""

    def __init__(self, env: Optional[Mapping[str, str]] = None) -> None:
        self._env = _EnvironmentFacade.from_environ(env)

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    def _get(self, key: str, default: Any = None):
        if has_app_context():
            app = cast("Flask", current_app)
            if key in app.config:
                return app.config.get(key)

        value = self._env.get(key)
        if value is not None:
            return value

        if default is None:
            return DEFAULT_APPLICATION_SETTINGS.get(key)
        return default

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._get(key, default)
        if value is None:
            return None
        return str(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Return a boolean configuration value."""

        value = self._get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            normalised = value.strip().lower()
            if normalised in {"1", "true", "yes", "on"}:
                return True
            if normalised in {"0", "false", "no", "off"}:
                return False
        return default

    def get_int(self, key: str, default: int = 0) -> int:
        """Return an integer configuration value."""

        value = self._get(key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_list(self, key: str) -> Tuple[str, ...]:
        """Return a tuple from a list value or a comma separated string."""

        value = self._get(key)
        if value is None:
            return ()
        if isinstance(value, str):
            items = value.split(",")
        else:
            try:
                items = list(value)
            except TypeError:
                return ()
        return tuple(str(item).strip() for item in items if str(item).strip())

    # ------------------------------------------------------------------
    # Security
    # ------------------------------------------------------------------
    @property
    def secret_key(self) -> str:
        return self.get_str("SECRET_KEY") or ""

    @property
    def csrf_secret_key(self) -> str:
        """Signing secret for anti-forgery tokens (falls back to SECRET_KEY)."""

        return self.get_str("CSRF_SECRET_KEY") or self.secret_key

    @property
    def csrf_token_max_age_ms(self) -> int:
        return self.get_int("CSRF_TOKEN_MAX_AGE_MS", 60 * 60 * 1000)

    @property
    def csrf_token_max_clock_skew_ms(self) -> int:
        return max(0, self.get_int("CSRF_TOKEN_MAX_CLOCK_SKEW_MS", 60 * 1000))

    @property
    def uses_default_secret(self) -> bool:
        return self.csrf_secret_key == DEFAULT_APPLICATION_SETTINGS["SECRET_KEY"]

    @property
    def allowed_redirect_hosts(self) -> Tuple[str, ...]:
        return self.get_list("ALLOWED_REDIRECT_HOSTS")

    @property
    def hsts_max_age_seconds(self) -> int:
        return self.get_int("HSTS_MAX_AGE_SECONDS", 31536000)

    def rate_limit(self, prefix: str, *, default_max: int, default_window: int) -> RateLimitSettings:
        """Return the request budget configured under ``{prefix}_*`` keys."""

        max_requests = self.get_int(f"{prefix}_MAX_REQUESTS", default_max)
        window = self.get_int(f"{prefix}_WINDOW_SECONDS", default_window)
        return RateLimitSettings(max_requests=max(1, max_requests), window_seconds=max(1, window))

    # ------------------------------------------------------------------
    # Audit / provisioning
    # ------------------------------------------------------------------
    @property
    def audit_log_capacity(self) -> int:
        return max(1, self.get_int("AUDIT_LOG_CAPACITY", 1000))

    @property
    def provision_sample_threats(self) -> bool:
        return self.get_bool("PROVISION_SAMPLE_THREATS", True)

    @property
    def testing(self) -> bool:
        return self.get_bool("TESTING")


settings = ApplicationSettings()

__all__ = ["ApplicationSettings", "RateLimitSettings", "settings"]
