from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from apps.core.contracts.policy import Role


@dataclass(frozen=True)
class Principal:
    role: Role
    id: str | None = None
    dealership: str | None = None

    @property
    def owner_label(self) -> str | None:
        """Owner value that records carry for this principal, e.g. "Vehicle Owner 1"."""
        if not self.id:
            return None
        return f"{self.role.value} {self.id}"

    def with_id(self, identity: str) -> Principal:
        return replace(self, id=identity)

    def to_payload(self) -> dict[str, str]:
        payload = {"role": self.role.value}
        if self.id is not None:
            payload["id"] = self.id
        if self.dealership is not None:
            payload["dealership"] = self.dealership
        return payload

    @classmethod
    def from_payload(cls, raw: Any) -> Principal | None:
        if not isinstance(raw, Mapping):
            return None
        role = Role.parse(raw.get("role"))
        if role is None:
            return None

        identity = raw.get("id")
        dealership = raw.get("dealership")
        if identity is not None and not isinstance(identity, str):
            return None
        if dealership is not None and not isinstance(dealership, str):
            return None
        return cls(role=role, id=identity or None, dealership=dealership or None)
