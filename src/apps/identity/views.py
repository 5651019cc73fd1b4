from __future__ import annotations

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.contracts.errors import UnknownRoleError
from apps.core.contracts.identity import Principal
from apps.core.contracts.policy import Role
from apps.core.responses import api_error, read_json_body, serializer_error
from apps.core.services.policy_table import grants_for
from apps.identity.serializers import LoginSerializer
from apps.identity.session_store import resolve_session_store


def _session_payload(principal: Principal | None) -> dict[str, object]:
    if principal is None:
        return {"authenticated": False, "principal": None, "grant": None}
    grant = grants_for(principal.role)
    return {
        "authenticated": True,
        "principal": principal.to_payload(),
        "role_name": principal.role.name,
        "grant": grant.to_dict() if grant else None,
    }


@require_http_methods(["GET"])
def roles_endpoint(request: HttpRequest) -> JsonResponse:
    items = []
    for role in Role:
        grant = grants_for(role)
        items.append(
            {
                "name": role.name,
                "label": role.value,
                "data_scope": grant.data_scope.value if grant else "",
            }
        )
    return JsonResponse({"items": items})


@require_http_methods(["GET"])
def session_endpoint(request: HttpRequest) -> JsonResponse:
    store = resolve_session_store(request)
    return JsonResponse(_session_payload(store.current_principal()))


@csrf_exempt
@require_http_methods(["POST"])
def login_endpoint(request: HttpRequest) -> JsonResponse:
    body, error = read_json_body(request)
    if error is not None:
        return error

    serializer = LoginSerializer(data=body)
    if not serializer.is_valid():
        return serializer_error(request, serializer.errors)

    store = resolve_session_store(request)
    try:
        principal = store.login(serializer.validated_data["role"])
    except UnknownRoleError as exc:
        return api_error(
            request,
            code="invalid_role",
            message=str(exc),
            status=400,
            details=tuple(role.value for role in Role),
        )
    return JsonResponse(_session_payload(principal))


@csrf_exempt
@require_http_methods(["POST"])
def logout_endpoint(request: HttpRequest) -> JsonResponse:
    resolve_session_store(request).logout()
    return JsonResponse({"ok": True, "authenticated": False})
