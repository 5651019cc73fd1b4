from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from apps.core.contracts.policy import Action
from apps.core.services.policy_engine import DecisionEngine
from apps.core.services.policy_table import RECORD_TYPES
from apps.records.catalog import records_for

FINALIZED_STATUSES = frozenset({"CLOSED", "APPROVED", "REJECTED"})
APPROVABLE_STATUSES = frozenset({"PENDING", "ACTION_REQUIRED"})

AUDIT_LOG_RESOURCE = "AuditLogs"


def visible_records(engine: DecisionEngine, resource_type: str, records: Iterable[Any]) -> list[Any]:
    return [record for record in records if engine.decide(resource_type, Action.VIEW, record)]


def can_view_audit_log(engine: DecisionEngine, record: Any = None) -> bool:
    # The AuditLogs screen grant plus the record's data scope.
    return engine.decide(AUDIT_LOG_RESOURCE, Action.VIEW, record)


def present_record(engine: DecisionEngine, record: dict[str, Any]) -> dict[str, Any]:
    payload = dict(record)
    if not can_view_audit_log(engine, record):
        payload.pop("audit_log", None)
    return payload


def audit_entries(engine: DecisionEngine, resource_types: Iterable[str] = RECORD_TYPES) -> list[dict[str, Any]]:
    """Audit log entries of every record the session may audit, newest first."""
    entries: list[dict[str, Any]] = []
    for resource_type in resource_types:
        for record in records_for(resource_type):
            if not can_view_audit_log(engine, record):
                continue
            for entry in record.get("audit_log", ()):
                entries.append({**entry, "record_id": record["id"], "record_type": resource_type})
    entries.sort(key=lambda entry: (entry["timestamp"], entry["record_id"]), reverse=True)
    return entries


def available_actions(engine: DecisionEngine, resource_type: str, record: Any) -> list[str]:
    """Workflow buttons for a record detail view.

    Approval is a grant check AND a status check; the status rule lives here,
    not in the decision engine.
    """
    status = record.get("status") if isinstance(record, dict) else getattr(record, "status", None)
    if status in FINALIZED_STATUSES:
        return []

    actions: list[str] = []
    if engine.decide(resource_type, Action.EDIT, record):
        actions.append("edit")
    if status in APPROVABLE_STATUSES and engine.decide(resource_type, Action.APPROVE, record):
        actions.extend(["approve", "reject"])
    return actions
