from __future__ import annotations

from dataclasses import replace

import pytest

from apps.core.contracts.errors import PolicyTableError
from apps.core.contracts.policy import Action, DataScope, Role
from apps.core.services.policy_table import (
    RECORD_TYPES,
    RESOURCE_TYPES,
    ROLE_GRANTS,
    grants_for,
    is_known_resource,
    validate_policy_table,
)


def test_every_role_has_a_grant() -> None:
    assert set(ROLE_GRANTS) == set(Role)


def test_grant_scopes_match_role_table() -> None:
    assert grants_for(Role.FI_PRODUCT_MANAGER).data_scope is DataScope.ALL
    assert grants_for(Role.CUSTOMER_SERVICE_REP).data_scope is DataScope.ALL
    assert grants_for(Role.DEALERSHIP_PORTAL_USER).data_scope is DataScope.DEALERSHIP
    assert grants_for(Role.VEHICLE_OWNER).data_scope is DataScope.OWN
    assert grants_for(Role.SYSTEM_ARCHITECT).data_scope is DataScope.ALL


def test_fi_product_manager_can_approve_every_record_type() -> None:
    grant = grants_for(Role.FI_PRODUCT_MANAGER)
    assert grant.can_approve == frozenset(RECORD_TYPES)
    assert grant.can_delete == frozenset({"Plan"})
    assert "SystemSettings" not in grant.can_view


def test_vehicle_owner_has_no_list_screens() -> None:
    grant = grants_for(Role.VEHICLE_OWNER)
    assert not any(resource.endswith("List") for resource in grant.can_view)
    assert grant.can_edit == frozenset()
    assert grant.can_create == frozenset({"Claim", "RenewalRequest", "CancellationRequest"})


def test_system_architect_only_manages_system_config() -> None:
    grant = grants_for(Role.SYSTEM_ARCHITECT)
    assert grant.can_view == frozenset({"Dashboard", "AuditLogs", "SystemSettings"})
    for action in (Action.CREATE, Action.EDIT, Action.DELETE):
        assert grant.resources_for(action) == frozenset({"SystemConfig"})
    assert grant.can_approve == frozenset()


def test_roles_with_detail_screens_can_view_the_record_type() -> None:
    for role, grant in ROLE_GRANTS.items():
        for record_type in RECORD_TYPES:
            if f"{record_type}Detail" in grant.can_view:
                assert record_type in grant.can_view, (role, record_type)


def test_grants_for_accepts_label_and_name() -> None:
    assert grants_for("Vehicle Owner") is ROLE_GRANTS[Role.VEHICLE_OWNER]
    assert grants_for("VEHICLE_OWNER") is ROLE_GRANTS[Role.VEHICLE_OWNER]
    assert grants_for("Auditor") is None
    assert grants_for(None) is None


def test_role_grants_is_read_only() -> None:
    with pytest.raises(TypeError):
        ROLE_GRANTS[Role.VEHICLE_OWNER] = ROLE_GRANTS[Role.FI_PRODUCT_MANAGER]  # type: ignore[index]


def test_grant_to_dict_uses_capability_keys() -> None:
    payload = grants_for(Role.DEALERSHIP_PORTAL_USER).to_dict()
    assert set(payload) == {"canView", "canCreate", "canEdit", "canApprove", "canDelete", "dataScope", "kpis"}
    assert payload["dataScope"] == "DEALERSHIP"
    assert payload["canEdit"] == ["ClaimDraft", "ContractDraft"]
    assert payload["kpis"] == ["ContractsSold", "PendingClaims", "RenewalOpportunities"]


def test_is_known_resource() -> None:
    assert is_known_resource("ContractList")
    assert is_known_resource("SystemConfig")
    assert not is_known_resource("Invoice")
    assert not is_known_resource(42)
    assert "Contract" in RESOURCE_TYPES


def test_validate_policy_table_rejects_missing_role() -> None:
    partial = {role: grant for role, grant in ROLE_GRANTS.items() if role is not Role.SYSTEM_ARCHITECT}
    with pytest.raises(PolicyTableError, match="SYSTEM_ARCHITECT"):
        validate_policy_table(partial)


def test_validate_policy_table_rejects_unknown_resource() -> None:
    grants = dict(ROLE_GRANTS)
    grants[Role.VEHICLE_OWNER] = replace(grants[Role.VEHICLE_OWNER], can_view=frozenset({"Dashbaord"}))
    with pytest.raises(PolicyTableError, match="Dashbaord"):
        validate_policy_table(grants)


def test_validate_policy_table_rejects_unknown_scope() -> None:
    grants = dict(ROLE_GRANTS)
    grants[Role.CUSTOMER_SERVICE_REP] = replace(grants[Role.CUSTOMER_SERVICE_REP], data_scope="REGION")
    with pytest.raises(PolicyTableError, match="unknown data scope"):
        validate_policy_table(grants)
