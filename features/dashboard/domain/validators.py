"""Free-text normalisation applied before user input is stored."""
from __future__ import annotations

_HTML_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#x60;",
}

_ESCAPE_TABLE = str.maketrans(_HTML_ESCAPES)


def sanitize_string(value: str) -> str:
    """Escape characters that could break out of an HTML context.

    ``&`` is passed through unchanged.
    """

    return value.translate(_ESCAPE_TABLE)
