from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from apps.core.contracts.errors import PolicyTableError
from apps.core.contracts.policy import Action, DataScope, Grant, Role

RECORD_TYPES: tuple[str, ...] = ("Contract", "Claim", "Renewal", "Cancellation")

SCREEN_TYPES: tuple[str, ...] = (
    "Dashboard",
    "ContractList",
    "ContractDetail",
    "ContractForm",
    "ClaimList",
    "ClaimDetail",
    "ClaimForm",
    "RenewalList",
    "RenewalDetail",
    "CancellationList",
    "CancellationDetail",
    "AuditLogs",
    "Reports",
    "SystemSettings",
)

CAPABILITY_TYPES: tuple[str, ...] = (
    "Plan",
    "CancellationRequest",
    "RenewalRequest",
    "ClaimStatus",
    "CancellationStatus",
    "ContractDraft",
    "ClaimDraft",
    "SystemConfig",
)

RESOURCE_TYPES: frozenset[str] = frozenset(RECORD_TYPES + SCREEN_TYPES + CAPABILITY_TYPES)


def _grant(
    *,
    view: Iterable[str],
    create: Iterable[str] = (),
    edit: Iterable[str] = (),
    approve: Iterable[str] = (),
    delete: Iterable[str] = (),
    scope: DataScope,
    kpis: Iterable[str] = (),
) -> Grant:
    return Grant(
        can_view=frozenset(view),
        can_create=frozenset(create),
        can_edit=frozenset(edit),
        can_approve=frozenset(approve),
        can_delete=frozenset(delete),
        data_scope=scope,
        kpis=tuple(kpis),
    )


# Record types sit next to the screens that show them so per-record view checks resolve.
_ROLE_GRANTS: dict[Role, Grant] = {
    Role.FI_PRODUCT_MANAGER: _grant(
        view=(
            "Dashboard",
            "ContractList",
            "ContractDetail",
            "ContractForm",
            "ClaimList",
            "ClaimDetail",
            "ClaimForm",
            "RenewalList",
            "RenewalDetail",
            "CancellationList",
            "CancellationDetail",
            "AuditLogs",
            "Reports",
            "Contract",
            "Claim",
            "Renewal",
            "Cancellation",
        ),
        create=("Contract", "Plan"),
        edit=("Contract", "Claim", "Renewal", "Cancellation"),
        approve=("Contract", "Claim", "Renewal", "Cancellation"),
        delete=("Plan",),
        scope=DataScope.ALL,
        kpis=("TotalContracts", "PendingApprovals", "SLACompliance", "RenewalRate", "ClaimPayouts"),
    ),
    Role.CUSTOMER_SERVICE_REP: _grant(
        view=(
            "Dashboard",
            "ContractList",
            "ContractDetail",
            "ClaimList",
            "ClaimDetail",
            "RenewalList",
            "RenewalDetail",
            "CancellationList",
            "CancellationDetail",
            "AuditLogs",
            "Contract",
            "Claim",
            "Renewal",
            "Cancellation",
        ),
        create=("Claim", "CancellationRequest"),
        edit=("ClaimStatus", "CancellationStatus"),
        scope=DataScope.ALL,
        kpis=("OpenClaims", "PendingCustomerActions", "CustomerSatisfaction"),
    ),
    Role.DEALERSHIP_PORTAL_USER: _grant(
        view=(
            "Dashboard",
            "ContractList",
            "ContractDetail",
            "ClaimList",
            "ClaimDetail",
            "RenewalList",
            "RenewalDetail",
            "Contract",
            "Claim",
            "Renewal",
        ),
        create=("Contract", "Claim"),
        edit=("ContractDraft", "ClaimDraft"),
        scope=DataScope.DEALERSHIP,
        kpis=("ContractsSold", "PendingClaims", "RenewalOpportunities"),
    ),
    Role.VEHICLE_OWNER: _grant(
        view=("Dashboard", "ContractDetail", "ClaimDetail", "RenewalDetail", "Contract", "Claim", "Renewal"),
        create=("Claim", "RenewalRequest", "CancellationRequest"),
        scope=DataScope.OWN,
        kpis=("MyContracts", "MyClaimsStatus"),
    ),
    Role.SYSTEM_ARCHITECT: _grant(
        view=("Dashboard", "AuditLogs", "SystemSettings"),
        create=("SystemConfig",),
        edit=("SystemConfig",),
        delete=("SystemConfig",),
        scope=DataScope.ALL,
        kpis=("SystemHealth", "APIIntegrations", "SLACompliance"),
    ),
}


def validate_policy_table(grants: Mapping[Role, Grant], *, known_resources: frozenset[str] = RESOURCE_TYPES) -> None:
    missing_roles = [role.name for role in Role if role not in grants]
    if missing_roles:
        raise PolicyTableError(f"roles without a grant: {', '.join(missing_roles)}")

    issues: list[str] = []
    for role, grant in grants.items():
        if not isinstance(grant.data_scope, DataScope):
            issues.append(f"{role.name}: unknown data scope {grant.data_scope!r}")
        for action in Action:
            unknown = sorted(grant.resources_for(action) - known_resources)
            if unknown:
                issues.append(f"{role.name}.{action.grant_key}: unknown resource types {', '.join(unknown)}")
    if issues:
        raise PolicyTableError("; ".join(issues))


validate_policy_table(_ROLE_GRANTS)

ROLE_GRANTS: Mapping[Role, Grant] = MappingProxyType(_ROLE_GRANTS)


def grants_for(role: Role | str | None) -> Grant | None:
    parsed = Role.parse(role)
    if parsed is None:
        return None
    return ROLE_GRANTS.get(parsed)


def is_known_resource(resource_type: object) -> bool:
    return isinstance(resource_type, str) and resource_type in RESOURCE_TYPES
