from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.config.env import get_runtime_settings, validate_runtime_settings
from apps.core.context import visible_navigation
from apps.core.contracts.errors import PolicyTableError
from apps.core.observability import METRICS
from apps.core.responses import read_json_body, serializer_error
from apps.core.security.rbac import require_permission
from apps.core.serializers import AuthorizeSerializer
from apps.core.services.policy_table import ROLE_GRANTS, validate_policy_table
from apps.identity.session_store import resolve_decision_engine

SERVICE_NAME = "contractportal"


def health_live(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"ok": True, "service": SERVICE_NAME, "status": "live"})


def _readiness_payload() -> tuple[dict[str, object], int]:
    config_issues = validate_runtime_settings(get_runtime_settings())
    try:
        validate_policy_table(ROLE_GRANTS)
        policy_issue = ""
    except PolicyTableError as exc:
        policy_issue = str(exc)

    # Config issues are advisory; only a broken policy table makes the service unready.
    ready = not policy_issue
    return (
        {
            "ok": ready,
            "service": SERVICE_NAME,
            "status": "ready" if ready else "not_ready",
            "roles": len(ROLE_GRANTS),
            "policy_issue": policy_issue,
            "config_issues": config_issues,
            "session_engine": settings.SESSION_ENGINE,
        },
        200 if ready else 503,
    )


def health_ready(request: HttpRequest) -> JsonResponse:
    payload, status = _readiness_payload()
    return JsonResponse(payload, status=status)


@csrf_exempt
@require_http_methods(["POST"])
def authorize_endpoint(request: HttpRequest) -> JsonResponse:
    body, error = read_json_body(request)
    if error is not None:
        return error

    serializer = AuthorizeSerializer(data=body)
    if not serializer.is_valid():
        return serializer_error(request, serializer.errors)

    data = serializer.validated_data
    decision = resolve_decision_engine(request).explain(data["resource_type"], data["action"], data["record"])
    return JsonResponse(decision.to_dict())


@require_http_methods(["GET"])
def navigation_endpoint(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"items": visible_navigation(resolve_decision_engine(request))})


@require_http_methods(["GET"])
@require_permission("SystemSettings")
def metrics_payload(request: HttpRequest) -> HttpResponse:
    return HttpResponse(
        METRICS.render_prometheus(),
        content_type="text/plain; version=0.0.4; charset=utf-8",
        status=200,
    )
