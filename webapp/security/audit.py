"""Security audit trail.

Security events are written to an :class:`AuditSink` injected into the
application at start-up instead of a module-level list, so each application
(and each test) owns its own bounded buffer.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Mapping, Optional

from flask import current_app, g, has_request_context, request

from core.time import isoformat_z, utc_now

if TYPE_CHECKING:  # pragma: no cover
    from webapp.api.context import RequestContext

_EXTENSION_KEY = "audit_sink"
DEFAULT_CAPACITY = 1000


@dataclass(frozen=True)
class SecurityEvent:
    """A single security-relevant occurrence."""

    type: str
    ip: str
    path: str
    method: str
    user_id: Optional[str] = None
    request_id: Optional[str] = None
    details: Mapping[str, Any] = field(default_factory=dict)
    level: int = logging.WARNING
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "timestamp": isoformat_z(self.timestamp),
            "type": self.type,
            "ip": self.ip,
            "path": self.path,
            "method": self.method,
        }
        if self.user_id:
            payload["userId"] = self.user_id
        if self.request_id:
            payload["requestId"] = self.request_id
        if self.details:
            payload["details"] = dict(self.details)
        return payload


class AuditSink(ABC):
    """Destination for :class:`SecurityEvent` records."""

    @abstractmethod
    def record(self, event: SecurityEvent) -> None:
        """Persist *event*."""

    @abstractmethod
    def events(self) -> List[SecurityEvent]:
        """Return a snapshot of the retained events, oldest first."""


class InMemoryAuditSink(AuditSink):
    """Bounded ring buffer that also forwards every event to a logger.

    Once ``capacity`` events are held the oldest one is dropped for each new
    event.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, logger: Optional[logging.Logger] = None) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._events: Deque[SecurityEvent] = deque(maxlen=capacity)
        self._guard = Lock()
        self._logger = logger or logging.getLogger("webapp.security")

    @property
    def capacity(self) -> int:
        return self._events.maxlen or 0

    def record(self, event: SecurityEvent) -> None:
        with self._guard:
            self._events.append(event)
        self._logger.log(
            event.level,
            "[SECURITY] %s",
            json.dumps(event.to_dict(), ensure_ascii=False, default=str),
            extra={
                "event": f"security.{event.type}",
                "request_id": event.request_id,
                "path": event.path,
            },
        )

    def events(self) -> List[SecurityEvent]:
        with self._guard:
            return list(self._events)

    def clear(self) -> None:
        with self._guard:
            self._events.clear()

    def __len__(self) -> int:
        with self._guard:
            return len(self._events)


def init_audit_sink(app, sink: Optional[AuditSink] = None) -> AuditSink:
    """Attach *sink* (or a default in-memory sink) to *app*."""

    if sink is None:
        from core.settings import settings

        with app.app_context():
            capacity = settings.audit_log_capacity
        sink = InMemoryAuditSink(capacity=capacity, logger=app.logger)
    app.extensions[_EXTENSION_KEY] = sink
    return sink


def get_audit_sink() -> AuditSink:
    return current_app.extensions[_EXTENSION_KEY]


def record_security_event(
    event_type: str,
    *,
    ctx: Optional["RequestContext"] = None,
    level: int = logging.WARNING,
    **details: Any,
) -> SecurityEvent:
    """Build a :class:`SecurityEvent` for the current request and record it."""

    if ctx is not None:
        event = SecurityEvent(
            type=event_type,
            ip=ctx.client_ip,
            path=ctx.path,
            method=ctx.method,
            user_id=ctx.user_id,
            request_id=ctx.request_id,
            details=details,
            level=level,
        )
    elif has_request_context():
        event = SecurityEvent(
            type=event_type,
            ip=request.remote_addr or "unknown",
            path=request.path,
            method=request.method,
            request_id=g.get("request_id"),
            details=details,
            level=level,
        )
    else:
        event = SecurityEvent(type=event_type, ip="unknown", path="", method="", details=details, level=level)

    get_audit_sink().record(event)
    return event


__all__ = [
    "AuditSink",
    "InMemoryAuditSink",
    "SecurityEvent",
    "get_audit_sink",
    "init_audit_sink",
    "record_security_event",
]
