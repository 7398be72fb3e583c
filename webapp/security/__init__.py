"""Security helpers for the web application."""

__all__ = [
    "AuditSink",
    "CsrfTokenService",
    "InMemoryAuditSink",
    "SecurityEvent",
    "TokenCheck",
    "get_audit_sink",
    "get_csrf_service",
    "is_blocked_url",
    "is_valid_redirect_url",
    "record_security_event",
]

from .audit import AuditSink, InMemoryAuditSink, SecurityEvent, get_audit_sink, record_security_event
from .csrf import CsrfTokenService, TokenCheck, get_csrf_service
from .urls import is_blocked_url, is_valid_redirect_url
