from flask import current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core.time import utc_now_isoformat

from . import bp
from .context import skip_auth
from ..extensions import db


@bp.get("/health/live")
@skip_auth
def health_live():
    """Simple liveness probe."""
    return jsonify({"status": "ok"}), 200


@bp.get("/health/ready")
@skip_auth
def health_ready():
    """Readiness probe checking the database."""
    details = {}

    try:
        db.session.execute(text("SELECT 1"))
        details["db"] = "ok"
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.warning(
            "Readiness probe could not reach the database",
            exc_info=True,
            extra={"event": "health.ready.db_error"},
        )
        details["db"] = "error"

    ok = details["db"] == "ok"
    details["status"] = "ok" if ok else "error"
    details["server_time"] = utc_now_isoformat()
    return jsonify(details), 200 if ok else 503
