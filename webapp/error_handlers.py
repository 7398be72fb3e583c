"""Centralized JSON error handling."""
import json

from flask import current_app, g, jsonify, request
from flask_babel import gettext as _, get_locale
from werkzeug.exceptions import HTTPException

from webapp.logging_utils import mask_sensitive_data


def _request_log_payload(status: int) -> dict:
    payload = {
        "method": request.method,
        "path": request.path,
        "full_path": request.full_path,
        "ua": request.user_agent.string,
        "status": status,
    }
    try:
        body = request.get_json(silent=True)
    except HTTPException:
        # The body itself was rejected (e.g. over MAX_CONTENT_LENGTH).
        body = None
    if body is not None:
        payload["json"] = mask_sensitive_data(body)
    return payload


def _json_response(payload: dict, status: int):
    response = jsonify(payload)
    response.status_code = status
    locale = get_locale()
    response.headers["Content-Language"] = str(
        locale or current_app.config.get("BABEL_DEFAULT_LOCALE", "en")
    )
    return response


def register_error_handlers(app):
    """Register JSON handlers for HTTP errors and unexpected exceptions.

    4xx responses are logged without a stack trace; anything else is logged
    with one and answered with a generic message.
    """

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        code = error.code or 500
        if code >= 500:
            return handle_unexpected_exception(error)

        current_app.logger.warning(
            json.dumps(_request_log_payload(code), ensure_ascii=False),
            extra={"event": "api.http_4xx", "request_id": g.get("request_id")},
        )
        slug = (error.name or "error").lower().replace(" ", "_")
        return _json_response({"error": slug, "message": _(error.name or "Error")}, code)

    @app.errorhandler(Exception)
    def handle_unexpected_exception(error: Exception):
        current_app.logger.exception(
            json.dumps(_request_log_payload(500), ensure_ascii=False),
            extra={"event": "api.http_5xx", "request_id": g.get("request_id")},
        )
        g.exception_logged = True
        return _json_response(
            {"error": "internal_error", "message": _("Internal Server Error")}, 500
        )
