from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    FI_PRODUCT_MANAGER = "F&I Product Manager"
    CUSTOMER_SERVICE_REP = "Customer Service Representative"
    DEALERSHIP_PORTAL_USER = "Dealership Portal User"
    VEHICLE_OWNER = "Vehicle Owner"
    SYSTEM_ARCHITECT = "System Architect"

    @classmethod
    def parse(cls, value: object) -> Role | None:
        """Accept a role value ("Vehicle Owner") or member name ("VEHICLE_OWNER")."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        raw = value.strip()
        for member in cls:
            if raw == member.value or raw == member.name:
                return member
        return None


class Action(str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    APPROVE = "approve"
    DELETE = "delete"

    @property
    def grant_key(self) -> str:
        return f"can{self.value.capitalize()}"

    @classmethod
    def parse(cls, value: object) -> Action | None:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        raw = value.strip()
        for member in cls:
            if raw == member.value or raw == member.grant_key:
                return member
        return None


class DataScope(str, Enum):
    ALL = "ALL"
    DEALERSHIP = "DEALERSHIP"
    OWN = "OWN"


@dataclass(frozen=True)
class Grant:
    can_view: frozenset[str]
    can_create: frozenset[str]
    can_edit: frozenset[str]
    can_approve: frozenset[str]
    can_delete: frozenset[str]
    data_scope: DataScope
    kpis: tuple[str, ...] = field(default=())

    def resources_for(self, action: Action) -> frozenset[str]:
        if action is Action.VIEW:
            return self.can_view
        if action is Action.CREATE:
            return self.can_create
        if action is Action.EDIT:
            return self.can_edit
        if action is Action.APPROVE:
            return self.can_approve
        if action is Action.DELETE:
            return self.can_delete
        return frozenset()

    def all_resources(self) -> frozenset[str]:
        return self.can_view | self.can_create | self.can_edit | self.can_approve | self.can_delete

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {action.grant_key: sorted(self.resources_for(action)) for action in Action}
        payload["dataScope"] = self.data_scope.value
        payload["kpis"] = list(self.kpis)
        return payload


@dataclass(frozen=True)
class PermissionDecision:
    allowed: bool
    resource_type: str
    action: str
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {
            "allowed": self.allowed,
            "resource_type": self.resource_type,
            "action": self.action,
            "reason": self.reason,
        }
