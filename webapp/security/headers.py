"""Request guards and response hardening for every request."""

from __future__ import annotations

from typing import Dict
from urllib.parse import urlsplit
from uuid import uuid4

from flask import Flask, g, jsonify, request
from flask_babel import gettext as _

from core.settings import settings
from webapp.security.audit import record_security_event
from webapp.security.urls import is_valid_redirect_url

REQUEST_ID_HEADER = "X-Request-ID"
UNSAFE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
REDIRECT_PARAMETERS = ("redirect", "returnTo", "next")

_CONTENT_SECURITY_POLICY: Dict[str, str] = {
    "default-src": "'self'",
    "script-src": "'self'",
    "style-src": "'self' 'unsafe-inline' https://fonts.googleapis.com",
    "font-src": "'self' https://fonts.gstatic.com",
    "img-src": "'self' data: https:",
    "connect-src": "'self'",
    "frame-src": "'none'",
    "object-src": "'none'",
    "base-uri": "'self'",
    "form-action": "'self'",
    "frame-ancestors": "'none'",
}


def _content_security_policy() -> str:
    return "; ".join(f"{name} {value}" for name, value in _CONTENT_SECURITY_POLICY.items())


def _is_api_path(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")


def _reject(error: str, message: str, status: int):
    response = jsonify({"error": error, "message": message})
    response.status_code = status
    return response


def _origin_matches_host(origin: str) -> bool:
    try:
        parsed = urlsplit(origin)
    except ValueError:
        return False
    return bool(parsed.netloc) and parsed.netloc.lower() == request.host.lower()


def register_security_middleware(app: Flask) -> None:
    """Install the request guards and response headers on *app*."""

    from webapp.api.rate_limit import check_rate_limit

    @app.before_request
    def _assign_request_id():
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        g.request_id = incoming if 0 < len(incoming) <= 128 and incoming.isprintable() else str(uuid4())

    @app.before_request
    def _reject_polluted_query():
        if not _is_api_path(request.path):
            return None
        duplicated = sorted(key for key in request.args if len(request.args.getlist(key)) > 1)
        if duplicated:
            record_security_event("parameter_pollution", parameters=duplicated)
            return _reject("invalid_request", _("Duplicate query parameters are not allowed."), 400)
        return None

    @app.before_request
    def _validate_redirect_targets():
        allowed_hosts = settings.allowed_redirect_hosts
        for name in REDIRECT_PARAMETERS:
            target = request.args.get(name)
            if target and not is_valid_redirect_url(target, allowed_hosts):
                record_security_event("invalid_redirect_attempt", parameter=name, target=target[:200])
                return _reject("invalid_redirect", _("Invalid redirect URL"), 400)
        return None

    @app.before_request
    def _check_origin():
        if request.method not in UNSAFE_METHODS or not _is_api_path(request.path):
            return None
        origin = request.headers.get("Origin")
        if origin and not _origin_matches_host(origin):
            record_security_event("csrf_origin_mismatch", origin=origin[:200], host=request.host)
            return _reject("forbidden", _("Invalid request origin"), 403)
        return None

    @app.before_request
    def _limit_api_requests():
        if not _is_api_path(request.path):
            return None
        return check_rate_limit("api")

    @app.after_request
    def _apply_security_headers(response):
        headers = response.headers
        headers["Content-Security-Policy"] = _content_security_policy()
        headers["X-Frame-Options"] = "DENY"
        headers["X-Content-Type-Options"] = "nosniff"
        headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        headers["Cross-Origin-Resource-Policy"] = "same-origin"
        headers["Cross-Origin-Opener-Policy"] = "same-origin"
        headers["X-DNS-Prefetch-Control"] = "off"
        headers["Strict-Transport-Security"] = (
            f"max-age={settings.hsts_max_age_seconds}; includeSubDomains; preload"
        )
        headers.pop("X-Powered-By", None)
        headers.pop("Server", None)

        if _is_api_path(request.path):
            headers["Cache-Control"] = "no-store, no-cache, must-revalidate, proxy-revalidate"
            headers["Pragma"] = "no-cache"
            headers["Expires"] = "0"
            headers["Surrogate-Control"] = "no-store"

        request_id = g.get("request_id")
        if request_id:
            headers[REQUEST_ID_HEADER] = request_id
        return response


__all__ = ["REQUEST_ID_HEADER", "register_security_middleware"]
