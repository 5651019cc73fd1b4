from __future__ import annotations

import logging
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse, JsonResponse

from apps.core.contracts.errors import ApiErrorPayload

LOGGER = logging.getLogger("contractportal")


def _error_response(request: HttpRequest) -> HttpResponse:
    request_id = str(getattr(request, "request_id", ""))
    LOGGER.exception("request_failed request_id=%s path=%s", request_id, request.path)
    if request.path.startswith("/api/"):
        payload = ApiErrorPayload(
            code="internal_error",
            message="An internal error occurred.",
            request_id=request_id,
        )
        return JsonResponse(payload.to_dict(), status=500)
    return HttpResponse(
        f"An internal error occurred. Request id: {request_id}",
        content_type="text/plain; charset=utf-8",
        status=500,
    )


class UnifiedErrorMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        try:
            return self.get_response(request)
        except Exception:
            return _error_response(request)

    def process_exception(self, request: HttpRequest, exception: Exception) -> HttpResponse:
        # Django calls this with the view's exception still being handled, so logging keeps the traceback.
        return _error_response(request)
