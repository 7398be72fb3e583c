"""OpenAPI helper utilities for documenting JSON request bodies."""
from __future__ import annotations

from typing import Any, Dict, Optional, Type, Union

from marshmallow import Schema


def json_request_body(
    description: str,
    schema: Union[Type[Schema], Dict[str, Any], None] = None,
    *,
    required: bool = True,
    example: Optional[Any] = None,
) -> Dict[str, Any]:
    """Create a requestBody block for JSON payloads.

    Args:
        description: Human readable description for Swagger UI.
        schema: A marshmallow schema class (resolved by the apispec plugin)
            or a raw JSON schema mapping.
        required: Whether the request body is required for the operation.
        example: Optional example payload to display in Swagger UI.

    Returns:
        A dictionary for the ``requestBody`` argument of ``@bp.doc``.
    """

    content: Dict[str, Any] = {
        "application/json": {
            "schema": schema if schema is not None else {"type": "object"},
        }
    }
    if example is not None:
        content["application/json"]["example"] = example

    return {
        "required": required,
        "description": description,
        "content": content,
    }


CSRF_HEADER_PARAMETER: Dict[str, Any] = {
    "in": "header",
    "name": "X-CSRF-Token",
    "required": True,
    "description": "Anti-forgery token obtained from GET /api/csrf-token.",
    "schema": {"type": "string"},
}
