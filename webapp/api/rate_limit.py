"""Per-client request budgets for API endpoints.

Each limiter counts requests per client address inside a sliding window and
rejects calls beyond the configured budget with ``429 Too Many Requests``.
Limiters live in ``app.extensions`` so separate applications never share
counters.
"""

from __future__ import annotations

import math
import time
from collections import deque
from dataclasses import dataclass
from functools import wraps
from threading import Lock
from typing import Any, Callable, Deque, Dict, Optional, TypeVar, cast

from flask import current_app, jsonify, request
from flask_babel import gettext as _

from core.settings import RateLimitSettings, settings

_EXTENSION_KEY = "rate_limiters"


def _prune(hits: Deque[float], horizon: float) -> None:
    while hits and hits[0] <= horizon:
        hits.popleft()


class RateLimitExceeded(RuntimeError):
    """Raised when a client has spent its request budget."""

    def __init__(self, retry_after: float) -> None:
        super().__init__("Rate limit exceeded")
        self.retry_after = retry_after


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration keys used by :class:`SlidingWindowRateLimiter`."""

    prefix: str
    default_max_requests: int
    default_window_seconds: int


class SlidingWindowRateLimiter:
    """Track request timestamps per key and enforce a budget per window."""

    def __init__(self, config: RateLimitConfig, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._config = config
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._guard = Lock()
        self._last_sweep: Optional[float] = None

    @property
    def name(self) -> str:
        return self._config.prefix

    @property
    def tracked_clients(self) -> int:
        with self._guard:
            return len(self._hits)

    def budget(self) -> RateLimitSettings:
        return settings.rate_limit(
            self._config.prefix,
            default_max=self._config.default_max_requests,
            default_window=self._config.default_window_seconds,
        )

    def hit(self, key: str) -> None:
        """Count one request for *key* or raise :class:`RateLimitExceeded`."""

        budget = self.budget()
        now = self._clock()
        horizon = now - budget.window_seconds

        with self._guard:
            if self._last_sweep is None or now - self._last_sweep >= budget.window_seconds:
                self._sweep(horizon)
                self._last_sweep = now

            hits = self._hits.get(key)
            if hits is not None:
                _prune(hits, horizon)
                if not hits:
                    del self._hits[key]
                    hits = None
            if hits is None:
                hits = self._hits[key] = deque()
            elif len(hits) >= budget.max_requests:
                retry_after = max(0.0, hits[0] + budget.window_seconds - now)
                raise RateLimitExceeded(retry_after)
            hits.append(now)

    def _sweep(self, horizon: float) -> None:
        # Caller holds the guard. Drops clients whose newest hit left the window.
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= horizon]
        for key in stale:
            del self._hits[key]

    def reset(self) -> None:
        with self._guard:
            self._hits.clear()
            self._last_sweep = None

    @staticmethod
    def retry_after_header(retry_after: float) -> str:
        return str(max(1, int(math.ceil(retry_after))))


def create_limiter(prefix: str, *, default_max_requests: int, default_window_seconds: int) -> SlidingWindowRateLimiter:
    """Convenience factory deriving ``{prefix}_MAX_REQUESTS`` style config keys."""

    return SlidingWindowRateLimiter(
        RateLimitConfig(
            prefix=prefix,
            default_max_requests=default_max_requests,
            default_window_seconds=default_window_seconds,
        )
    )


def init_rate_limiters(app) -> Dict[str, SlidingWindowRateLimiter]:
    limiters = {
        "api": create_limiter("RATE_LIMIT_API", default_max_requests=100, default_window_seconds=15 * 60),
        "sensitive": create_limiter("RATE_LIMIT_SENSITIVE", default_max_requests=5, default_window_seconds=60),
    }
    app.extensions[_EXTENSION_KEY] = limiters
    return limiters


def get_limiter(name: str) -> SlidingWindowRateLimiter:
    return current_app.extensions[_EXTENSION_KEY][name]


def client_key() -> str:
    return request.remote_addr or "unknown"


def rate_limited_response(exc: RateLimitExceeded):
    response = jsonify(
        {
            "error": "rate_limited",
            "message": _("Too many requests, please try again later."),
            "retryAfter": math.ceil(exc.retry_after),
        }
    )
    response.status_code = 429
    response.headers["Retry-After"] = SlidingWindowRateLimiter.retry_after_header(exc.retry_after)
    return response


def check_rate_limit(name: str, *, event: Optional[str] = None):
    """Spend one request from limiter *name*; return a 429 response when exhausted."""

    from webapp.security.audit import record_security_event

    try:
        get_limiter(name).hit(client_key())
    except RateLimitExceeded as exc:
        record_security_event(event or "rate_limit_exceeded", limiter=name)
        return rate_limited_response(exc)
    return None


F = TypeVar("F", bound=Callable[..., Any])


def limit_rate(name: str) -> Callable[[F], F]:
    """Decorator that enforces the named limiter for an API endpoint."""

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):  # type: ignore[misc]
            rejected = check_rate_limit(name, event="sensitive_rate_limit_exceeded")
            if rejected is not None:
                return rejected
            return func(*args, **kwargs)

        return cast(F, wrapper)

    return decorator


__all__ = [
    "RateLimitExceeded",
    "SlidingWindowRateLimiter",
    "check_rate_limit",
    "create_limiter",
    "get_limiter",
    "init_rate_limiters",
    "limit_rate",
]
