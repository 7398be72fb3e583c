import logging

from flask import jsonify
from flask_babel import gettext as _

from features.dashboard.application.dto import SubscriptionCreateInput, SubscriptionUpdateInput
from features.dashboard.application.use_cases import (
    CancelSubscriptionUseCase,
    CreateSubscriptionUseCase,
    GetSubscriptionUseCase,
    UpdateSubscriptionUseCase,
)
from features.dashboard.domain.exceptions import DashboardValidationError
from features.ownership import OwnedRecordConflictError, OwnedRecordNotFoundError
from webapp.security.audit import record_security_event

from . import bp
from .context import RequestContext, csrf_protected, json_error, load_body, require_auth
from .openapi import CSRF_HEADER_PARAMETER, json_request_body
from .rate_limit import limit_rate
from .schemas import CreateSubscriptionSchema, UpdateSubscriptionSchema
from .serializers import serialize_subscription


@bp.get("/subscription")
@require_auth
def get_subscription(ctx: RequestContext):
    """Return the caller's subscription or ``null``."""

    subscription = GetSubscriptionUseCase().execute(ctx.user_id)
    if subscription is None:
        return jsonify(None)
    return jsonify(serialize_subscription(subscription))


@bp.post("/subscription")
@require_auth
@csrf_protected
@limit_rate("sensitive")
@bp.doc(
    parameters=[CSRF_HEADER_PARAMETER],
    requestBody=json_request_body(
        "Subscribe the current user to a plan.",
        CreateSubscriptionSchema,
        example={"planId": "3c8e6a52-8d4b-4f5e-9a59-6f0a4d6c1e21", "billingCycle": "monthly"},
    ),
)
def create_subscription(ctx: RequestContext):
    data, error = load_body(CreateSubscriptionSchema, ctx)
    if error is not None:
        return error

    try:
        subscription = CreateSubscriptionUseCase().execute(
            ctx.user_id, SubscriptionCreateInput(**data)
        )
    except DashboardValidationError as exc:
        response = {"error": "validation_error", "message": _(str(exc))}
        if exc.field:
            response["field"] = exc.field
        return jsonify(response), 400
    except OwnedRecordConflictError:
        record_security_event("subscription_conflict", ctx=ctx)
        return json_error("conflict", _("User already has a subscription"), 409)

    record_security_event(
        "subscription_created",
        ctx=ctx,
        level=logging.INFO,
        planId=subscription.plan_id,
        billingCycle=subscription.billing_cycle,
    )
    return jsonify(serialize_subscription(subscription)), 201


@bp.patch("/subscription")
@require_auth
@csrf_protected
@limit_rate("sensitive")
@bp.doc(
    parameters=[CSRF_HEADER_PARAMETER],
    requestBody=json_request_body(
        "Change the status or billing cycle of the current subscription.",
        UpdateSubscriptionSchema,
        example={"billingCycle": "yearly"},
    ),
)
def update_subscription(ctx: RequestContext):
    data, error = load_body(UpdateSubscriptionSchema, ctx)
    if error is not None:
        return error

    try:
        subscription = UpdateSubscriptionUseCase().execute(
            ctx.user_id, SubscriptionUpdateInput(**data)
        )
    except OwnedRecordNotFoundError:
        return json_error("not_found", _("Subscription not found"), 404)

    record_security_event("subscription_updated", ctx=ctx, level=logging.INFO, changes=sorted(data))
    return jsonify(serialize_subscription(subscription))


@bp.delete("/subscription")
@require_auth
@csrf_protected
@limit_rate("sensitive")
@bp.doc(parameters=[CSRF_HEADER_PARAMETER])
def cancel_subscription(ctx: RequestContext):
    """Cancel the caller's subscription; the row is kept with status ``cancelled``."""

    try:
        subscription = CancelSubscriptionUseCase().execute(ctx.user_id)
    except OwnedRecordNotFoundError:
        return json_error("not_found", _("Subscription not found"), 404)

    record_security_event("subscription_cancelled", ctx=ctx, level=logging.INFO)
    return jsonify(serialize_subscription(subscription))
