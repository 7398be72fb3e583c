"""Authentication and anti-forgery decorators for API views.

Authenticated views receive an explicit :class:`RequestContext` keyword
argument instead of reading identity off global request state.  Mutating
views stack :func:`csrf_protected` under :func:`require_auth`::

    @bp.post("/threat-logs")
    @require_auth
    @csrf_protected
    def create_threat_log(ctx: RequestContext): ...
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Any, Optional, Tuple, Type

from flask import g, jsonify, request
from flask_babel import gettext as _
from flask_login import current_user
from marshmallow import Schema, ValidationError

from webapp.auth import current_session_id
from webapp.security.audit import record_security_event
from webapp.security.csrf import get_csrf_service

CSRF_HEADER = "X-CSRF-Token"


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Identity of the caller for one authenticated request."""

    user_id: str
    session_id: str
    client_ip: str
    method: str
    path: str
    request_id: Optional[str] = None


def json_error(error: str, message: str, status: int):
    return jsonify({"error": error, "message": message}), status


def _build_context(user_id: str) -> RequestContext:
    return RequestContext(
        user_id=user_id,
        session_id=current_session_id(create=True),
        client_ip=request.remote_addr or "unknown",
        method=request.method,
        path=request.path,
        request_id=g.get("request_id"),
    )


def skip_auth(f):
    """Mark an endpoint as intentionally public."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        return f(*args, **kwargs)

    decorated_function._skip_auth = True
    return decorated_function


def require_auth(f):
    """Reject anonymous callers with 401 and pass ``ctx`` to the view."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            record_security_event("unauthorized_access")
            return json_error("unauthorized", _("Unauthorized"), 401)
        ctx = _build_context(str(current_user.get_id()))
        return f(*args, ctx=ctx, **kwargs)

    decorated_function._auth_enforced = True
    return decorated_function


def csrf_protected(f):
    """Require a valid ``X-CSRF-Token`` header bound to the caller's session."""

    @wraps(f)
    def decorated_function(*args, ctx: RequestContext, **kwargs):
        token = request.headers.get(CSRF_HEADER)
        if not token:
            record_security_event("csrf_token_missing", ctx=ctx)
            return json_error("csrf_failed", _("CSRF token required"), 403)

        check = get_csrf_service().inspect(token, ctx.session_id)
        if not check.ok:
            record_security_event("csrf_token_invalid", ctx=ctx, reason=check.value)
            return json_error("csrf_failed", _("Invalid CSRF token"), 403)

        return f(*args, ctx=ctx, **kwargs)

    decorated_function._csrf_protected = True
    return decorated_function


def load_body(schema_cls: Type[Schema], ctx: RequestContext) -> Tuple[Optional[dict], Any]:
    """Validate the JSON body with *schema_cls*.

    Returns ``(data, None)`` on success and ``(None, response)`` otherwise.
    """

    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    try:
        return schema_cls().load(payload), None
    except ValidationError as exc:
        record_security_event("invalid_input", ctx=ctx, errors=exc.messages)
        response = jsonify(
            {
                "error": "invalid_request",
                "message": _("Invalid request body"),
                "errors": exc.messages,
            }
        )
        return None, (response, 400)


__all__ = [
    "CSRF_HEADER",
    "RequestContext",
    "csrf_protected",
    "json_error",
    "load_body",
    "require_auth",
    "skip_auth",
]
