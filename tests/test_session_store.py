from __future__ import annotations

import json
import logging

import pytest
from django.contrib.sessions.backends.signed_cookies import SessionStore as SignedCookieSession

from apps.core.contracts.errors import UnknownRoleError
from apps.core.contracts.identity import Principal
from apps.core.contracts.policy import Action, Role
from apps.core.services.policy_engine import DecisionEngine
from apps.core.services.policy_table import RESOURCE_TYPES
from apps.identity.session_store import (
    DEFAULT_SESSION_KEY,
    SessionStore,
    deserialize_principal,
    serialize_principal,
)


def test_fresh_store_has_no_principal() -> None:
    store = SessionStore({})
    assert store.current_principal() is None
    assert store.is_authenticated is False


@pytest.mark.parametrize("role", [role for role in Role if role is not Role.VEHICLE_OWNER])
def test_login_persists_role_only_principal(role: Role) -> None:
    storage: dict[str, object] = {}
    store = SessionStore(storage)
    principal = store.login(role)

    assert principal == Principal(role=role)
    assert store.current_principal() == principal
    assert json.loads(storage[DEFAULT_SESSION_KEY]) == {"role": role.value}


def test_vehicle_owner_login_backfills_placeholder_identity() -> None:
    storage: dict[str, object] = {}
    store = SessionStore(storage)
    principal = store.login(Role.VEHICLE_OWNER)

    assert principal == Principal(role=Role.VEHICLE_OWNER, id="1")
    assert principal.owner_label == "Vehicle Owner 1"
    assert json.loads(storage[DEFAULT_SESSION_KEY]) == {"role": "Vehicle Owner", "id": "1"}


def test_login_accepts_label_and_name() -> None:
    store = SessionStore({})
    assert store.login("Customer Service Representative").role is Role.CUSTOMER_SERVICE_REP
    assert store.login("SYSTEM_ARCHITECT").role is Role.SYSTEM_ARCHITECT


def test_login_is_idempotent() -> None:
    storage: dict[str, object] = {}
    store = SessionStore(storage)
    first = store.login(Role.VEHICLE_OWNER)
    persisted = storage[DEFAULT_SESSION_KEY]
    second = store.login(Role.VEHICLE_OWNER)

    assert first == second
    assert store.current_principal() == second
    assert storage[DEFAULT_SESSION_KEY] == persisted


def test_login_replaces_previous_principal() -> None:
    store = SessionStore({})
    store.login(Role.VEHICLE_OWNER)
    store.login(Role.DEALERSHIP_PORTAL_USER)
    assert store.current_principal() == Principal(role=Role.DEALERSHIP_PORTAL_USER)


def test_login_with_unknown_role_raises_and_keeps_session() -> None:
    storage: dict[str, object] = {}
    store = SessionStore(storage)
    store.login(Role.FI_PRODUCT_MANAGER)

    with pytest.raises(UnknownRoleError, match="Auditor") as excinfo:
        store.login("Auditor")

    assert excinfo.value.role == "Auditor"
    assert store.current_principal() == Principal(role=Role.FI_PRODUCT_MANAGER)


def test_logout_clears_principal_and_decisions() -> None:
    storage: dict[str, object] = {}
    store = SessionStore(storage)
    engine = DecisionEngine(store)
    store.login(Role.FI_PRODUCT_MANAGER)
    assert engine.decide("Dashboard") is True

    store.logout()

    assert store.current_principal() is None
    assert DEFAULT_SESSION_KEY not in storage
    for resource_type in sorted(RESOURCE_TYPES):
        for action in Action:
            assert engine.decide(resource_type, action) is False


def test_logout_without_session_is_a_no_op() -> None:
    store = SessionStore({})
    store.logout()
    assert store.current_principal() is None


def test_reload_from_storage_yields_equal_principal() -> None:
    storage: dict[str, object] = {}
    SessionStore(storage).login(Role.VEHICLE_OWNER)
    reloaded = SessionStore(storage).current_principal()
    assert reloaded == Principal(role=Role.VEHICLE_OWNER, id="1")


def test_reload_backfills_identity_for_legacy_owner_state() -> None:
    storage: dict[str, object] = {DEFAULT_SESSION_KEY: json.dumps({"role": "Vehicle Owner"})}
    store = SessionStore(storage)
    assert store.current_principal() == Principal(role=Role.VEHICLE_OWNER, id="1")
    assert json.loads(storage[DEFAULT_SESSION_KEY])["id"] == "1"


def test_reload_keeps_existing_identity() -> None:
    storage: dict[str, object] = {DEFAULT_SESSION_KEY: json.dumps({"role": "Vehicle Owner", "id": "2"})}
    store = SessionStore(storage)
    assert store.current_principal() == Principal(role=Role.VEHICLE_OWNER, id="2")
    assert store.backfill_identity() is False


def test_backfill_can_be_disabled() -> None:
    store = SessionStore({}, backfill_enabled=False)
    assert store.login(Role.VEHICLE_OWNER) == Principal(role=Role.VEHICLE_OWNER)
    assert store.backfill_identity() is False


def test_backfill_uses_configured_placeholder(settings) -> None:
    settings.PORTAL_OWNER_PLACEHOLDER_ID = "7"
    store = SessionStore({})
    assert store.login(Role.VEHICLE_OWNER).owner_label == "Vehicle Owner 7"


def test_backfill_skips_roles_without_own_scope() -> None:
    store = SessionStore({})
    store.login(Role.DEALERSHIP_PORTAL_USER)
    assert store.backfill_identity() is False
    assert store.current_principal().id is None


def test_custom_session_key() -> None:
    storage: dict[str, object] = {}
    store = SessionStore(storage, key="portal_principal")
    store.login(Role.CUSTOMER_SERVICE_REP)
    assert "portal_principal" in storage
    assert DEFAULT_SESSION_KEY not in storage


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps(["Vehicle Owner"]),
        json.dumps({"role": "Auditor"}),
        json.dumps({"id": "1"}),
        json.dumps({"role": "Vehicle Owner", "id": 1}),
        42,
        None,
    ],
)
def test_malformed_state_is_purged_and_logged(raw, caplog) -> None:
    storage: dict[str, object] = {DEFAULT_SESSION_KEY: raw}
    store = SessionStore(storage)

    with caplog.at_level(logging.WARNING, logger="contractportal.session"):
        assert store.current_principal() is None

    assert DEFAULT_SESSION_KEY not in storage
    assert "session_state_malformed" in caplog.text


def test_mapping_state_is_accepted() -> None:
    storage: dict[str, object] = {DEFAULT_SESSION_KEY: {"role": "Dealership Portal User", "dealership": "Dealership B"}}
    principal = SessionStore(storage).current_principal()
    assert principal == Principal(role=Role.DEALERSHIP_PORTAL_USER, dealership="Dealership B")


def test_serialize_principal_round_trip() -> None:
    principal = Principal(role=Role.DEALERSHIP_PORTAL_USER, dealership="Dealership B")
    raw = serialize_principal(principal)
    assert json.loads(raw) == {"dealership": "Dealership B", "role": "Dealership Portal User"}
    assert deserialize_principal(raw) == principal
    assert deserialize_principal(raw.encode("utf-8")) == principal


def test_signed_cookie_session_round_trip() -> None:
    session = SignedCookieSession()
    SessionStore(session).login(Role.VEHICLE_OWNER)
    session.save()

    reloaded = SignedCookieSession(session_key=session.session_key)
    assert SessionStore(reloaded).current_principal() == Principal(role=Role.VEHICLE_OWNER, id="1")


def test_separate_sessions_do_not_share_state() -> None:
    first = SessionStore({})
    second = SessionStore({})
    first.login(Role.FI_PRODUCT_MANAGER)
    second.login(Role.VEHICLE_OWNER)

    assert DecisionEngine(first).decide("ContractList") is True
    assert DecisionEngine(second).decide("ContractList") is False
