from __future__ import annotations

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods

from apps.core.contracts.policy import Action
from apps.core.responses import api_error
from apps.core.security.rbac import enforce_permission, require_permission
from apps.core.services.policy_table import RECORD_TYPES, grants_for
from apps.identity.session_store import resolve_decision_engine, resolve_session_store
from apps.records.catalog import find_record, records_for
from apps.records.dashboard import build_dashboard
from apps.records.rules import audit_entries, available_actions, can_view_audit_log, present_record, visible_records


def _unknown_type(request: HttpRequest, resource_type: str) -> JsonResponse:
    return api_error(
        request,
        code="not_found",
        message=f"Unknown record type: {resource_type}",
        status=404,
        details=tuple(RECORD_TYPES),
    )


@require_http_methods(["GET"])
def record_list_endpoint(request: HttpRequest, resource_type: str) -> JsonResponse:
    if resource_type not in RECORD_TYPES:
        return _unknown_type(request, resource_type)
    denied = enforce_permission(request, f"{resource_type}List")
    if denied is not None:
        return denied

    engine = resolve_decision_engine(request)
    items = visible_records(engine, resource_type, records_for(resource_type))
    status_filter = request.GET.get("status", "").strip().upper()
    if status_filter:
        items = [item for item in items if item["status"] == status_filter]

    return JsonResponse(
        {
            "resource_type": resource_type,
            "can_create": engine.decide(resource_type, Action.CREATE),
            "count": len(items),
            "items": [present_record(engine, item) for item in items],
        }
    )


@require_http_methods(["GET"])
def record_detail_endpoint(request: HttpRequest, resource_type: str, record_id: str) -> JsonResponse:
    if resource_type not in RECORD_TYPES:
        return _unknown_type(request, resource_type)
    denied = enforce_permission(request, f"{resource_type}Detail")
    if denied is not None:
        return denied

    record = find_record(resource_type, record_id)
    if record is None:
        return api_error(request, code="not_found", message=f"{resource_type} {record_id} not found", status=404)

    engine = resolve_decision_engine(request)
    if not engine.decide(resource_type, Action.VIEW, record):
        return api_error(
            request,
            code="forbidden",
            message=f"{resource_type} {record_id} is outside your data scope",
            status=403,
        )

    return JsonResponse(
        {
            "record": present_record(engine, record),
            "available_actions": available_actions(engine, resource_type, record),
            "can_view_audit_log": can_view_audit_log(engine, record),
        }
    )


@require_http_methods(["GET"])
@require_permission("Dashboard")
def dashboard_endpoint(request: HttpRequest) -> JsonResponse:
    principal = resolve_session_store(request).current_principal()
    grant = grants_for(principal.role)
    payload = build_dashboard(resolve_decision_engine(request), grant)
    return JsonResponse({"role": principal.role.value, **payload})


@require_http_methods(["GET"])
@require_permission("AuditLogs")
def audit_log_endpoint(request: HttpRequest) -> JsonResponse:
    record_type = request.GET.get("record_type", "").strip()
    if record_type and record_type not in RECORD_TYPES:
        return _unknown_type(request, record_type)

    entries = audit_entries(resolve_decision_engine(request), (record_type,) if record_type else RECORD_TYPES)
    return JsonResponse({"count": len(entries), "items": entries})
