"""Per-role dashboard: KPI values and recent records.

KPI values are computed over the records the session can see, so a dealership
user's "Contracts Sold" counts its own dealership and a vehicle owner's
"My Active Contracts" counts only its own contracts.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any

from apps.core.contracts.policy import Action, Grant
from apps.core.services.policy_engine import DecisionEngine
from apps.core.services.policy_table import RECORD_TYPES
from apps.records.catalog import Record, records_for
from apps.records.rules import present_record, visible_records

RECENT_LIMIT = 5

Visible = Mapping[str, list[Record]]


def _count(resource_type: str, predicate: Callable[[Record], bool] = lambda record: True) -> Callable[[Visible], int]:
    def compute(visible: Visible) -> int:
        return sum(1 for record in visible[resource_type] if predicate(record))

    return compute


def _static(value: str) -> Callable[[Visible], str]:
    return lambda visible: value


def _pending_approvals(visible: Visible) -> int:
    return sum(1 for resource_type in ("Contract", "Claim") for record in visible[resource_type] if record["status"] == "PENDING")


def _claim_payouts(visible: Visible) -> str:
    total = sum((Decimal(claim["estimated_cost"]) for claim in visible["Claim"] if claim["status"] == "APPROVED"), Decimal(0))
    return f"${total:.0f}"


def _status_is(*statuses: str) -> Callable[[Record], bool]:
    return lambda record: record["status"] in statuses


def _status_not(*statuses: str) -> Callable[[Record], bool]:
    return lambda record: record["status"] not in statuses


# name -> (label, compute)
KPI_DEFINITIONS: dict[str, tuple[str, Callable[[Visible], Any]]] = {
    "TotalContracts": ("Total Contracts", _count("Contract")),
    "PendingApprovals": ("Pending Approvals", _pending_approvals),
    "SLACompliance": ("SLA Compliance", _static("98%")),
    "RenewalRate": ("Renewal Rate", _static("75%")),
    "ClaimPayouts": ("Total Claim Payouts", _claim_payouts),
    "OpenClaims": ("Open Claims", _count("Claim", _status_not("CLOSED", "REJECTED"))),
    "PendingCustomerActions": ("Pending Customer Actions", _count("Claim", _status_is("ACTION_REQUIRED"))),
    "CustomerSatisfaction": ("Customer Satisfaction", _static("4.7/5")),
    "ContractsSold": ("Contracts Sold (Your Dealership)", _count("Contract")),
    "PendingClaims": ("Pending Claims (Your Dealership)", _count("Claim", _status_is("PENDING"))),
    "RenewalOpportunities": ("Renewal Opportunities", _count("Renewal", _status_is("PENDING"))),
    "MyContracts": ("My Active Contracts", _count("Contract")),
    "MyClaimsStatus": ("My Open Claims", _count("Claim", _status_not("CLOSED"))),
    "SystemHealth": ("System Health", _static("Online")),
    "APIIntegrations": ("API Integrations", _static("9/10 Active")),
}


def build_dashboard(engine: DecisionEngine, grant: Grant) -> dict[str, Any]:
    visible = {resource_type: visible_records(engine, resource_type, records_for(resource_type)) for resource_type in RECORD_TYPES}

    kpis = []
    for name in grant.kpis:
        definition = KPI_DEFINITIONS.get(name)
        if definition is None:
            continue
        label, compute = definition
        kpis.append({"name": name, "label": label, "value": compute(visible)})

    recent = []
    for resource_type in RECORD_TYPES:
        screen = f"{resource_type}List"
        if not engine.decide(screen):
            continue
        recent.append(
            {
                "resource_type": resource_type,
                "screen": screen,
                "can_create": engine.decide(resource_type, Action.CREATE),
                "items": [present_record(engine, record) for record in visible[resource_type][:RECENT_LIMIT]],
            }
        )

    return {"kpis": kpis, "recent": recent}
