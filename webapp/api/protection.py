import logging

from flask import jsonify

from features.dashboard.application.dto import ProtectionToggleInput
from features.dashboard.application.use_cases import (
    GetProtectionStatusUseCase,
    ToggleProtectionUseCase,
)
from webapp.security.audit import record_security_event

from . import bp
from .context import RequestContext, csrf_protected, load_body, require_auth
from .openapi import CSRF_HEADER_PARAMETER, json_request_body
from .schemas import UpdateProtectionSchema
from .serializers import serialize_protection


@bp.get("/protection-status")
@require_auth
def get_protection_status(ctx: RequestContext):
    """Return the caller's protection switches, creating defaults on first use."""

    status = GetProtectionStatusUseCase().execute(ctx.user_id)
    return jsonify(serialize_protection(status))


@bp.patch("/protection-status")
@require_auth
@csrf_protected
@bp.doc(
    parameters=[CSRF_HEADER_PARAMETER],
    requestBody=json_request_body(
        "Enable or disable one protection head.",
        UpdateProtectionSchema,
        example={"headType": "deepfake", "enabled": False},
    ),
)
def update_protection_status(ctx: RequestContext):
    data, error = load_body(UpdateProtectionSchema, ctx)
    if error is not None:
        return error

    status = ToggleProtectionUseCase().execute(ctx.user_id, ProtectionToggleInput(**data))
    record_security_event(
        "protection_toggled",
        ctx=ctx,
        level=logging.INFO,
        headType=data["head_type"],
        enabled=data["enabled"],
    )
    return jsonify(serialize_protection(status))
