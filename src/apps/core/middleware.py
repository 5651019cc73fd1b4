from __future__ import annotations

import logging
import re
import time
import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.core.observability import METRICS

LOGGER = logging.getLogger("contractportal")

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

UNMATCHED_ROUTE = "unmatched"


def _route_label(request: HttpRequest) -> str:
    # URL pattern, not the raw path.
    match = getattr(request, "resolver_match", None)
    if match is None or not match.route:
        return UNMATCHED_ROUTE
    return "/" + match.route


class RequestIdMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        supplied = str(request.headers.get("X-Request-ID", "")).strip()
        request_id = supplied if _REQUEST_ID_RE.fullmatch(supplied) else str(uuid.uuid4())
        request.request_id = request_id
        response = self.get_response(request)
        response["X-Request-ID"] = request_id
        return response


class StructuredRequestLogMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        start = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        METRICS.observe_http(_route_label(request), request.method or "GET", response.status_code, elapsed_ms)

        # Only report a role when a view already loaded the session principal.
        store = getattr(request, "_portal_session_store", None)
        principal = store.current_principal() if store is not None else None
        LOGGER.info(
            "request_completed method=%s path=%s status=%s elapsed_ms=%.2f role=%s request_id=%s",
            request.method,
            request.path,
            response.status_code,
            elapsed_ms,
            principal.role.name if principal else "-",
            getattr(request, "request_id", ""),
        )
        return response
