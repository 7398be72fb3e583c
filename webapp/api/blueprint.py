"""Blueprint that refuses to register unguarded API routes."""
from __future__ import annotations

from collections.abc import Iterable
import inspect
from typing import Callable

from flask.views import MethodView
from flask_smorest import Blueprint as SmorestBlueprint

AUTH_MARKERS = ("_auth_enforced", "_skip_auth")
CSRF_MARKER = "_csrf_protected"
UNSAFE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _iter_wrapped(callable_obj: Callable) -> Iterable[Callable]:
    """Yield *callable_obj* and every function reachable through ``__wrapped__``."""

    current = callable_obj
    seen: set[int] = set()
    while current is not None and id(current) not in seen:
        yield current
        seen.add(id(current))
        current = getattr(current, "__wrapped__", None)


def declared_markers(func: Callable) -> set[str]:
    """Return the guard markers set anywhere in the decorator chain of *func*."""

    found: set[str] = set()
    for candidate in _iter_wrapped(func):
        for marker in AUTH_MARKERS + (CSRF_MARKER,):
            if getattr(candidate, marker, False):
                found.add(marker)
    return found


def _route_methods(view_func, options) -> set[str]:
    methods = options.get("methods") or getattr(view_func, "methods", None) or ("GET",)
    return {method.upper() for method in methods}


class AuthEnforcedBlueprint(SmorestBlueprint):
    """Blueprint whose routes must state how they authenticate.

    Every route needs ``require_auth`` or ``skip_auth``; routes accepting a
    state-changing method also need ``csrf_protected``.  A missing decorator
    fails at import time instead of shipping an open endpoint.
    """

    def add_url_rule(  # type: ignore[override]
        self,
        rule,
        endpoint=None,
        view_func=None,
        provide_automatic_options=None,
        *,
        parameters=None,
        tags=None,
        **options,
    ):
        if view_func is None:
            raise TypeError("view_func must be provided")

        self._check_guards(rule, endpoint, view_func, _route_methods(view_func, options))

        return super().add_url_rule(
            rule,
            endpoint=endpoint,
            view_func=view_func,
            provide_automatic_options=provide_automatic_options,
            parameters=parameters,
            tags=tags,
            **options,
        )

    def _check_guards(self, rule, endpoint, view_func, methods: set[str]) -> None:
        if inspect.isclass(view_func) and issubclass(view_func, MethodView):
            func = view_func.as_view(endpoint or view_func.__name__)
        else:
            func = view_func

        view_name = endpoint or getattr(view_func, "__name__", "<unnamed>")
        markers = declared_markers(func)

        if not markers.intersection(AUTH_MARKERS):
            raise RuntimeError(
                f"API route '{rule}' (endpoint '{view_name}') must declare an authentication decorator."
            )
        if methods & UNSAFE_METHODS and CSRF_MARKER not in markers:
            raise RuntimeError(
                f"API route '{rule}' (endpoint '{view_name}') changes state without CSRF protection."
            )


__all__ = ["AuthEnforcedBlueprint", "declared_markers"]
