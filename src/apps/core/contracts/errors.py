from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ApiErrorPayload:
    code: str
    message: str
    request_id: str
    details: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


class PolicyTableError(ValueError):
    """The static role grant table is inconsistent."""


class UnknownRoleError(ValueError):
    def __init__(self, role: object) -> None:
        super().__init__(f"unknown role: {role!r}")
        self.role = role
