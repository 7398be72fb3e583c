import logging

from flask import jsonify
from flask_babel import gettext as _
from flask_login import current_user

from webapp.auth import end_session
from webapp.security.audit import record_security_event

from . import bp
from .context import RequestContext, csrf_protected, require_auth
from .openapi import CSRF_HEADER_PARAMETER


@bp.get("/auth/user")
@require_auth
def get_auth_user(ctx: RequestContext):
    """Return the signed-in user's profile."""

    return jsonify(current_user.to_dict())


@bp.post("/logout")
@require_auth
@csrf_protected
@bp.doc(parameters=[CSRF_HEADER_PARAMETER])
def logout(ctx: RequestContext):
    """End the session; tokens issued for it stop validating."""

    end_session()
    record_security_event("logout", ctx=ctx, level=logging.INFO)
    return jsonify({"message": _("Logged out")})
