from __future__ import annotations

import json
from typing import Any

from django.http import HttpRequest, JsonResponse

from apps.core.contracts.errors import ApiErrorPayload


def parse_json_body(request: HttpRequest) -> dict[str, Any]:
    raw = request.body.decode("utf-8") if request.body else ""
    if not raw.strip():
        return {}
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("JSON body must be an object")
    return payload


def api_error(
    request: HttpRequest,
    *,
    code: str,
    message: str,
    status: int,
    details: tuple[str, ...] = (),
) -> JsonResponse:
    request_id = str(getattr(request, "request_id", ""))
    payload = ApiErrorPayload(code=code, message=message, request_id=request_id, details=details)
    return JsonResponse(payload.to_dict(), status=status)


def read_json_body(request: HttpRequest) -> tuple[dict[str, Any], JsonResponse | None]:
    """Parse the request body, or build the 400 response to return instead."""
    try:
        return parse_json_body(request), None
    except (UnicodeDecodeError, ValueError) as exc:
        return {}, api_error(request, code="invalid_json", message=str(exc), status=400)


def serializer_error(request: HttpRequest, errors: dict[str, Any]) -> JsonResponse:
    details = tuple(
        f"{field}: {message}"
        for field, messages in sorted(errors.items())
        for message in (messages if isinstance(messages, list) else [messages])
    )
    return api_error(request, code="validation_error", message="Request payload is invalid", status=400, details=details)
