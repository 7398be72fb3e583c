"""Helper utilities for structured logging within the web application."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, Dict, Tuple

SENSITIVE_KEYWORDS = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "csrf",
        "cookie",
        "authorization",
        "api_key",
    }
)

MAX_LOG_PAYLOAD_BYTES = 60_000
MAX_LOGGED_STRING_LENGTH = 120


def is_sensitive_key(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    lowered = key.lower()
    return any(keyword in lowered for keyword in SENSITIVE_KEYWORDS)


def mask_sensitive_data(data: Any) -> Any:
    """Recursively replace values stored under sensitive keys with ``***``."""

    if isinstance(data, Mapping):
        return {
            key: "***" if is_sensitive_key(key) else mask_sensitive_data(value)
            for key, value in data.items()
        }
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
        return [mask_sensitive_data(item) for item in data]
    return data


def truncate_long_values(value: Any, *, limit: int = MAX_LOGGED_STRING_LENGTH) -> Any:
    if isinstance(value, Mapping):
        return {key: truncate_long_values(item, limit=limit) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [truncate_long_values(item, limit=limit) for item in value]
    if isinstance(value, str) and len(value) > limit:
        return f"{value[:limit]}… ({len(value)} chars)"
    if isinstance(value, (bytes, bytearray)):
        return f"<binary {len(value)} bytes>"
    return value


def serialize_for_logging(payload: Any) -> Tuple[str, int]:
    text = json.dumps(payload, ensure_ascii=False, default=str)
    return text, len(text.encode("utf-8"))


def prepare_log_payload(payload: Dict[str, Any], *, max_bytes: int = MAX_LOG_PAYLOAD_BYTES) -> str:
    """Serialise *payload*, truncating long values and finally dropping the body."""

    text, size = serialize_for_logging(payload)
    if size <= max_bytes:
        return text

    truncated = truncate_long_values(payload)
    text, size = serialize_for_logging(truncated)
    if size <= max_bytes:
        return text

    minimal = {
        "status": payload.get("status"),
        "method": payload.get("method"),
        "message": "payload omitted due to size limit",
        "_truncation": {"limitBytes": max_bytes, "originalBytes": size, "omitted": True},
    }
    return serialize_for_logging(minimal)[0]


__all__ = [
    "mask_sensitive_data",
    "prepare_log_payload",
    "serialize_for_logging",
    "truncate_long_values",
]
