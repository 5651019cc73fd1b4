"""Per-session principal storage backed by a Django session (or any mutable mapping)."""

from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping
from typing import Any

from django.conf import settings
from django.http import HttpRequest

from apps.core.contracts.errors import UnknownRoleError
from apps.core.contracts.identity import Principal
from apps.core.contracts.policy import DataScope, Role
from apps.core.services.policy_engine import DecisionEngine
from apps.core.services.policy_table import grants_for

LOGGER = logging.getLogger("contractportal.session")

DEFAULT_SESSION_KEY = "current_principal"
_UNLOADED = object()


def serialize_principal(principal: Principal) -> str:
    return json.dumps(principal.to_payload(), sort_keys=True)


def deserialize_principal(raw: Any) -> Principal | None:
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    return Principal.from_payload(raw)


class SessionStore:
    """Holds at most one authenticated principal for one session.

    The principal is persisted as a single JSON object under one well-known key,
    overwritten on login and removed on logout. Absent or malformed state means
    no session; malformed state is logged and purged rather than raised.
    """

    def __init__(
        self,
        storage: MutableMapping[str, Any],
        *,
        key: str | None = None,
        placeholder_id: str | None = None,
        backfill_enabled: bool | None = None,
    ) -> None:
        self._storage = storage
        self.key = key or getattr(settings, "PORTAL_SESSION_KEY", DEFAULT_SESSION_KEY)
        self.placeholder_id = (
            placeholder_id if placeholder_id is not None else getattr(settings, "PORTAL_OWNER_PLACEHOLDER_ID", "1")
        )
        self.backfill_enabled = (
            backfill_enabled if backfill_enabled is not None else getattr(settings, "PORTAL_IDENTITY_BACKFILL", True)
        )
        self._principal: Principal | None | object = _UNLOADED

    def _load(self) -> Principal | None:
        if self.key not in self._storage:
            return None
        raw = self._storage.get(self.key)
        principal = deserialize_principal(raw)
        if principal is None:
            LOGGER.warning("session_state_malformed key=%s type=%s", self.key, type(raw).__name__)
            self._storage.pop(self.key, None)
        return principal

    def _persist(self) -> None:
        if isinstance(self._principal, Principal):
            self._storage[self.key] = serialize_principal(self._principal)
        else:
            self._storage.pop(self.key, None)

    def current_principal(self) -> Principal | None:
        if self._principal is _UNLOADED:
            self._principal = self._load()
            if self._principal is not None:
                self.backfill_identity()
        return self._principal if isinstance(self._principal, Principal) else None

    @property
    def is_authenticated(self) -> bool:
        return self.current_principal() is not None

    def login(self, role: Role | str) -> Principal:
        parsed = Role.parse(role)
        if parsed is None:
            raise UnknownRoleError(role)

        self._principal = Principal(role=parsed)
        self._persist()
        self.backfill_identity()
        LOGGER.info("session_login role=%s", parsed.name)
        return self._principal

    def logout(self) -> None:
        previous = self._principal
        self._principal = None
        self._storage.pop(self.key, None)
        if isinstance(previous, Principal):
            LOGGER.info("session_logout role=%s", previous.role.name)

    def backfill_identity(self) -> bool:
        """Attach the placeholder identity to an OWN-scoped principal that has none.

        Stands in for identity issuance at login; disabled via PORTAL_IDENTITY_BACKFILL.
        """
        principal = self._principal
        if not isinstance(principal, Principal) or principal.id or not self.backfill_enabled:
            return False
        grant = grants_for(principal.role)
        if grant is None or grant.data_scope is not DataScope.OWN or not self.placeholder_id:
            return False

        self._principal = principal.with_id(self.placeholder_id)
        self._persist()
        LOGGER.info("session_identity_backfilled role=%s id=%s", principal.role.name, self.placeholder_id)
        return True


def resolve_session_store(request: HttpRequest) -> SessionStore:
    store = getattr(request, "_portal_session_store", None)
    if store is None:
        store = SessionStore(request.session)
        request._portal_session_store = store
    return store


def resolve_decision_engine(request: HttpRequest) -> DecisionEngine:
    engine = getattr(request, "_portal_decision_engine", None)
    if engine is None:
        engine = DecisionEngine(resolve_session_store(request))
        request._portal_decision_engine = engine
    return engine
