from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from django.conf import settings

from apps.core.contracts.identity import Principal
from apps.core.contracts.policy import Action, DataScope, PermissionDecision
from apps.core.observability import METRICS
from apps.core.services.policy_table import grants_for, is_known_resource

LOGGER = logging.getLogger("contractportal.authz")

DEFAULT_DEALERSHIP = "Dealership A"
UNKNOWN_LABEL = "unknown"


class PrincipalSource(Protocol):
    def current_principal(self) -> Principal | None: ...


def _record_value(record: Any, attribute: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(attribute)
    return getattr(record, attribute, None)


def _action_label(action: object) -> str:
    if isinstance(action, Action):
        return action.value
    return str(action)


def _metric_labels(resource_type: object, action: object) -> tuple[str, str]:
    # Labels are limited to known resource types and actions.
    parsed_action = Action.parse(action)
    return (
        resource_type if is_known_resource(resource_type) else UNKNOWN_LABEL,
        parsed_action.value if parsed_action is not None else UNKNOWN_LABEL,
    )


class PolicyEngine:
    @staticmethod
    def evaluate(
        principal: Principal | None,
        resource_type: str,
        action: Action | str = Action.VIEW,
        record: Any = None,
        *,
        default_dealership: str = DEFAULT_DEALERSHIP,
    ) -> PermissionDecision:
        """Run the feature, action and data-scope gates in order.

        Never raises for a policy miss: every unresolvable input maps to a denial
        with a reason code. ``record`` is only consulted for its ``owner`` and
        ``dealership`` attributes, and the scope gate is skipped when it is None.
        """
        action_label = _action_label(action)
        resource_label = resource_type if isinstance(resource_type, str) else repr(resource_type)

        def _decision(allowed: bool, reason: str) -> PermissionDecision:
            return PermissionDecision(allowed, resource_label, action_label, reason)

        if principal is None:
            return _decision(False, "no_session")

        grant = grants_for(principal.role)
        if grant is None:
            LOGGER.error("authz_unknown_role role=%r resource=%s", principal.role, resource_label)
            return _decision(False, "unknown_role")

        parsed_action = Action.parse(action)
        if parsed_action is None:
            return _decision(False, "unknown_action")

        if not isinstance(resource_type, str):
            return _decision(False, "not_viewable" if parsed_action is Action.VIEW else "action_not_granted")

        if parsed_action is Action.VIEW:
            if resource_type not in grant.can_view:
                return _decision(False, "not_viewable")
        elif resource_type not in grant.resources_for(parsed_action):
            return _decision(False, "action_not_granted")

        if record is None:
            return _decision(True, "granted")

        scope = grant.data_scope
        if scope is DataScope.ALL:
            return _decision(True, "scope_all")

        if scope is DataScope.OWN:
            owner_label = principal.owner_label
            if owner_label is not None and _record_value(record, "owner") == owner_label:
                return _decision(True, "scope_own_match")
            return _decision(False, "scope_own_mismatch")

        if scope is DataScope.DEALERSHIP:
            dealership = principal.dealership or default_dealership
            if dealership and _record_value(record, "dealership") == dealership:
                return _decision(True, "scope_dealership_match")
            return _decision(False, "scope_dealership_mismatch")

        LOGGER.error("authz_unknown_scope role=%s scope=%r resource=%s", principal.role.name, scope, resource_label)
        return _decision(False, "unknown_scope")


class DecisionEngine:
    """Binds the pure policy evaluation to one session's principal."""

    def __init__(self, principals: PrincipalSource, *, default_dealership: str | None = None) -> None:
        self._principals = principals
        if default_dealership is None:
            default_dealership = getattr(settings, "PORTAL_DEFAULT_DEALERSHIP", DEFAULT_DEALERSHIP)
        self.default_dealership = default_dealership

    def explain(self, resource_type: str, action: Action | str = Action.VIEW, record: Any = None) -> PermissionDecision:
        decision = PolicyEngine.evaluate(
            self._principals.current_principal(),
            resource_type,
            action,
            record,
            default_dealership=self.default_dealership,
        )
        METRICS.observe_decision(*_metric_labels(resource_type, action), decision.allowed, decision.reason)
        if not decision.allowed:
            LOGGER.debug(
                "authz_denied resource=%s action=%s reason=%s",
                decision.resource_type,
                decision.action,
                decision.reason,
            )
        return decision

    def decide(self, resource_type: str, action: Action | str = Action.VIEW, record: Any = None) -> bool:
        return self.explain(resource_type, action, record).allowed
