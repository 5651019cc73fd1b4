"""RBAC decorators and permission enforcement utilities."""

from __future__ import annotations

import functools
from typing import Any, Callable

from django.http import HttpRequest, HttpResponse

from apps.core.contracts.policy import Action
from apps.core.responses import api_error
from apps.identity.session_store import resolve_decision_engine, resolve_session_store


def _describe(resource_type: str, action: Action | str) -> str:
    label = action.value if isinstance(action, Action) else str(action)
    return f"{label}:{resource_type}"


def enforce_permission(
    request: HttpRequest,
    resource_type: str,
    action: Action | str = Action.VIEW,
) -> HttpResponse | None:
    """Return the 401/403 response for a missing grant, or None when the session holds it."""
    if not resolve_session_store(request).is_authenticated:
        return api_error(
            request,
            code="unauthenticated",
            message="Log in with a role to continue",
            status=401,
        )

    if not resolve_decision_engine(request).decide(resource_type, action):
        return api_error(
            request,
            code="forbidden",
            message=f"Missing permission: {_describe(resource_type, action)}",
            status=403,
        )
    return None


def require_permission(resource_type: str, action: Action | str = Action.VIEW):
    """
    Decorator to enforce a (resource type, action) grant on a view.

    Usage:
        @require_permission("AuditLogs")
        def audit_log_endpoint(request):
            ...

        @require_permission("Contract", Action.CREATE)
        def create_contract_endpoint(request):
            ...
    """
    def decorator(view_func: Callable) -> Callable:
        @functools.wraps(view_func)
        def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
            denied = enforce_permission(request, resource_type, action)
            if denied is not None:
                return denied
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
