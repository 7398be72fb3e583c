"""Request body schemas for the dashboard API."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from features.dashboard.domain.entities import (
    BILLING_CYCLES,
    HEAD_TYPES,
    SUBSCRIPTION_STATUSES,
    THREAT_LEVELS,
    THREAT_SOURCE_TYPES,
    THREAT_STATUSES,
)

_IDENTIFIER = validate.Regexp(r"^[A-Za-z0-9_-]+$", error="Invalid identifier format")


class StrictBoolean(fields.Boolean):
    """Accept only JSON ``true`` and ``false``."""

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, bool):
            raise self.make_error("invalid", input=value)
        return value


class CreateSubscriptionSchema(Schema):
    plan_id = fields.String(
        required=True,
        data_key="planId",
        validate=[validate.Length(min=1, max=100), _IDENTIFIER],
    )
    billing_cycle = fields.String(
        required=True,
        data_key="billingCycle",
        validate=validate.OneOf(BILLING_CYCLES),
    )


class UpdateSubscriptionSchema(Schema):
    status = fields.String(validate=validate.OneOf(SUBSCRIPTION_STATUSES))
    billing_cycle = fields.String(data_key="billingCycle", validate=validate.OneOf(BILLING_CYCLES))


class UpdateProtectionSchema(Schema):
    head_type = fields.String(required=True, data_key="headType", validate=validate.OneOf(HEAD_TYPES))
    enabled = StrictBoolean(required=True)


class CreateThreatLogSchema(Schema):
    head_type = fields.String(required=True, data_key="headType", validate=validate.OneOf(HEAD_TYPES))
    threat_level = fields.String(
        required=True, data_key="threatLevel", validate=validate.OneOf(THREAT_LEVELS)
    )
    description = fields.String(required=True, validate=validate.Length(min=1, max=1000))
    status = fields.String(load_default="detected", validate=validate.OneOf(THREAT_STATUSES))
    source = fields.String(validate=validate.Length(max=255))
    source_type = fields.String(data_key="sourceType", validate=validate.OneOf(THREAT_SOURCE_TYPES))
    blocked_content = fields.String(data_key="blockedContent", validate=validate.Length(max=1000))
    reason = fields.String(validate=validate.Length(max=500))
    ip_address = fields.String(data_key="ipAddress", validate=validate.Length(max=64))
    action_taken = fields.String(data_key="actionTaken", validate=validate.Length(max=255))


class UpdateThreatLogSchema(Schema):
    status = fields.String(required=True, validate=validate.OneOf(THREAT_STATUSES))


class RecordIdSchema(Schema):
    id = fields.UUID(required=True)


THREAT_LOG_DETAIL_FIELDS = (
    "source",
    "source_type",
    "blocked_content",
    "reason",
    "ip_address",
    "action_taken",
)

__all__ = [
    "CreateSubscriptionSchema",
    "CreateThreatLogSchema",
    "RecordIdSchema",
    "THREAT_LOG_DETAIL_FIELDS",
    "UpdateProtectionSchema",
    "UpdateSubscriptionSchema",
    "UpdateThreatLogSchema",
]
