from flask import jsonify

from webapp.security.csrf import get_csrf_service

from . import bp
from .context import RequestContext, require_auth


@bp.get("/csrf-token")
@require_auth
def issue_csrf_token(ctx: RequestContext):
    """Return an anti-forgery token bound to the caller's session."""

    token = get_csrf_service().issue(ctx.session_id)
    return jsonify({"csrfToken": token})
