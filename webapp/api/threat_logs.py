from flask import jsonify
from flask_babel import gettext as _
from marshmallow import ValidationError

from features.dashboard.application.dto import ThreatLogCreateInput
from features.dashboard.application.use_cases import (
    CreateThreatLogUseCase,
    ListThreatLogsUseCase,
    UpdateThreatLogStatusUseCase,
)
from features.ownership import OwnedRecordNotFoundError
from webapp.security.audit import record_security_event

from . import bp
from .context import RequestContext, csrf_protected, json_error, load_body, require_auth
from .openapi import CSRF_HEADER_PARAMETER, json_request_body
from .schemas import (
    THREAT_LOG_DETAIL_FIELDS,
    CreateThreatLogSchema,
    RecordIdSchema,
    UpdateThreatLogSchema,
)
from .serializers import serialize_threat_log


@bp.get("/threat-logs")
@require_auth
def list_threat_logs(ctx: RequestContext):
    """Return the caller's threat logs, newest first."""

    logs = ListThreatLogsUseCase().execute(ctx.user_id)
    return jsonify([serialize_threat_log(log) for log in logs])


@bp.post("/threat-logs")
@require_auth
@csrf_protected
@bp.doc(
    parameters=[CSRF_HEADER_PARAMETER],
    requestBody=json_request_body(
        "Record a threat for the current user.",
        CreateThreatLogSchema,
        example={
            "headType": "surveillance",
            "threatLevel": "high",
            "description": "Tracking pixel detected",
            "sourceType": "email",
        },
    ),
)
def create_threat_log(ctx: RequestContext):
    data, error = load_body(CreateThreatLogSchema, ctx)
    if error is not None:
        return error

    payload = ThreatLogCreateInput(
        head_type=data["head_type"],
        threat_level=data["threat_level"],
        description=data["description"],
        status=data["status"],
        details={key: data[key] for key in THREAT_LOG_DETAIL_FIELDS if key in data},
    )
    log = CreateThreatLogUseCase().execute(ctx.user_id, payload)
    return jsonify(serialize_threat_log(log)), 201


@bp.patch("/threat-logs/<string:log_id>")
@require_auth
@csrf_protected
@bp.doc(
    parameters=[CSRF_HEADER_PARAMETER],
    requestBody=json_request_body(
        "Change the status of one of the caller's threat logs.",
        UpdateThreatLogSchema,
        example={"status": "resolved"},
    ),
)
def update_threat_log(log_id: str, ctx: RequestContext):
    try:
        record_id = str(RecordIdSchema().load({"id": log_id})["id"])
    except ValidationError:
        record_security_event("invalid_id_parameter", ctx=ctx, id=log_id[:64])
        return json_error("invalid_request", _("Invalid ID format"), 400)

    data, error = load_body(UpdateThreatLogSchema, ctx)
    if error is not None:
        return error

    try:
        log = UpdateThreatLogStatusUseCase().execute(ctx.user_id, record_id, data["status"])
    except OwnedRecordNotFoundError:
        record_security_event("resource_not_found_or_idor", ctx=ctx, resource="threat_log", id=record_id)
        return json_error("not_found", _("Threat log not found"), 404)

    return jsonify(serialize_threat_log(log))
