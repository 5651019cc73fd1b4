"""Deterministic sample records for the contract portal.

Owner and dealership assignment follows a fixed pattern so scope checks are
reproducible: every third contract belongs to "Vehicle Owner 1", the rest
alternate between owners 2 and 3, and even-numbered contracts are sold by
"Dealership A". Claims, renewals and cancellations inherit both values from
the contract they reference.

Every record carries a ``workflow_history`` (stages reached for its status)
and an ``audit_log`` of ``{timestamp, user, action}`` entries.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any


CONTRACT_STATUSES = ("NEW", "DRAFT", "IN_PROGRESS", "APPROVED", "PENDING", "REJECTED", "CLOSED", "SLA_BREACH")
CLAIM_STATUSES = (
    "NEW",
    "DRAFT",
    "PENDING",
    "ACTION_REQUIRED",
    "IN_PROGRESS",
    "APPROVED",
    "REJECTED",
    "CLOSED",
    "SLA_BREACH",
    "ESCALATION",
)
RENEWAL_STATUSES = ("PENDING", "APPROVED", "REJECTED", "COMPLETED", "ACTION_REQUIRED")
CANCELLATION_STATUSES = ("PENDING", "APPROVED", "REJECTED", "COMPLETED", "IN_PROGRESS")

UNSUBMITTED_STATUSES = frozenset({"NEW", "DRAFT"})
REVIEWED_STATUSES = frozenset({"IN_PROGRESS", "PENDING", "APPROVED", "REJECTED", "CLOSED", "SLA_BREACH", "ESCALATION"})

Record = dict[str, Any]


def _money(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01")))


def _stage(stage: str, date: str, actor: str) -> dict[str, str]:
    return {"stage": stage, "date": date, "actor": actor}


def _entry(timestamp: str, user: str, action: str) -> dict[str, str]:
    return {"timestamp": timestamp, "user": user, "action": action}


def workflow_history(status: str) -> list[dict[str, str]]:
    history = [_stage("Initiated", "2023-01-01", "System")]
    if status not in UNSUBMITTED_STATUSES:
        history.append(_stage("Submitted", "2023-01-02", "User"))
    if status in REVIEWED_STATUSES:
        history.append(_stage("Underwriting Review", "2023-01-05", "F&I Manager"))
        history.append(_stage("Adjudication", "2023-01-10", "Claims Adjuster"))
    if status in {"APPROVED", "CLOSED"}:
        history.append(_stage("Approved", "2023-01-15", "System"))
    if status in {"REJECTED", "SLA_BREACH"}:
        history.append(_stage("Resolution", "2023-01-16", "F&I Manager"))
    return history


def _build_contracts() -> tuple[Record, ...]:
    contracts = []
    for i in range(15):
        contract_id = f"VSC-{1000 + i}"
        status = CONTRACT_STATUSES[i % len(CONTRACT_STATUSES)]
        dealership = "Dealership A" if i % 2 == 0 else "Dealership B"
        start_date = f"2023-01-{10 + i}"
        audit_log = [
            _entry(f"{start_date} 10:00", "Admin", "Created Contract Draft"),
            _entry(f"{start_date} 11:30", f"{dealership} User", f"Submitted Contract {contract_id}"),
        ]
        if status not in UNSUBMITTED_STATUSES:
            audit_log.append(_entry(f"{start_date} 14:00", "F&I Manager", f"Contract {status}"))
        contracts.append(
            {
                "id": contract_id,
                "resource_type": "Contract",
                "contract_id": contract_id,
                "vehicle_vin": f"VIN{100000 + (i * 7919) % 900000}",
                "plan_name": f"Plan {'ABC'[i % 3]}",
                "start_date": start_date,
                "end_date": f"2028-01-{10 + i}",
                "status": status,
                "price": _money(Decimal(2500 + i * 50)),
                "customer_name": f"Customer {i + 1}",
                "dealership": dealership,
                "owner": "Vehicle Owner 1" if i % 3 == 0 else f"Vehicle Owner {2 + (i % 2)}",
                "workflow_history": workflow_history(status),
                "audit_log": audit_log,
            }
        )
    return tuple(contracts)


def _linked(contract: Record) -> Record:
    return {
        "contract_id": contract["contract_id"],
        "customer_name": contract["customer_name"],
        "dealership": contract["dealership"],
        "owner": contract["owner"],
    }


def _build_claims(contracts: tuple[Record, ...]) -> tuple[Record, ...]:
    claims = []
    for i in range(15):
        contract = contracts[i % len(contracts)]
        claim_id = f"CLM-{5000 + i}"
        status = CLAIM_STATUSES[i % len(CLAIM_STATUSES)]
        date_filed = f"2023-02-{10 + i}"
        audit_log = [
            _entry(f"{date_filed} 09:00", contract["owner"], f"Filed Claim {claim_id}"),
            _entry(f"{date_filed} 15:15", "Customer Service Rep", f"Reviewed Claim {claim_id}"),
        ]
        if status == "PENDING":
            audit_log.append(_entry(f"{date_filed} 16:00", "AI System", f"Fraud screening completed for {claim_id}"))
        claims.append(
            {
                "id": claim_id,
                "resource_type": "Claim",
                "claim_id": claim_id,
                **_linked(contract),
                "vehicle_vin": contract["vehicle_vin"],
                "date_filed": date_filed,
                "service_provider": f"Service Center {'AB'[i % 2]}",
                "estimated_cost": _money(Decimal(500 + i * 20)),
                "status": status,
                "description": f"Repair for {'engine malfunction' if i % 2 == 0 else 'transmission issue'}.",
                "workflow_history": workflow_history(status),
                "audit_log": audit_log,
            }
        )
    return tuple(claims)


def _build_renewals(contracts: tuple[Record, ...]) -> tuple[Record, ...]:
    renewals = []
    for i in range(10):
        contract = contracts[i % len(contracts)]
        renewal_id = f"REN-{8000 + i}"
        status = RENEWAL_STATUSES[i % len(RENEWAL_STATUSES)]
        offered = f"2023-11-{10 + i}"
        audit_log = [
            _entry(f"{offered} 10:00", "System", "Generated Renewal Offer"),
            _entry(f"{offered} 11:30", contract["owner"], f"Requested Renewal {renewal_id}"),
        ]
        if status == "APPROVED":
            audit_log.append(_entry(f"{offered} 14:00", "F&I Manager", f"Renewal {status}"))
        renewals.append(
            {
                "id": renewal_id,
                "resource_type": "Renewal",
                "renewal_id": renewal_id,
                **_linked(contract),
                "original_end_date": contract["end_date"],
                "new_end_date": f"2030-01-{10 + i}",
                "status": status,
                "renewal_price": _money(Decimal(contract["price"]) * Decimal("1.05")),
                "workflow_history": workflow_history(status),
                "audit_log": audit_log,
            }
        )
    return tuple(renewals)


def _build_cancellations(contracts: tuple[Record, ...]) -> tuple[Record, ...]:
    cancellations = []
    for i in range(10):
        contract = contracts[i % len(contracts)]
        cancellation_id = f"CAN-{9000 + i}"
        status = CANCELLATION_STATUSES[i % len(CANCELLATION_STATUSES)]
        request_date = f"2023-03-{10 + i}"
        audit_log = [
            _entry(f"{request_date} 10:00", "Customer Service Rep", f"Initiated Cancellation {cancellation_id}"),
            _entry(f"{request_date} 11:30", "F&I Manager", f"Reviewed Cancellation {cancellation_id}"),
        ]
        if status == "APPROVED":
            audit_log.append(_entry(f"{request_date} 14:00", "System", f"Processed Refund for {cancellation_id}"))
        cancellations.append(
            {
                "id": cancellation_id,
                "resource_type": "Cancellation",
                "cancellation_id": cancellation_id,
                **_linked(contract),
                "request_date": request_date,
                "reason": "Sold Vehicle" if i % 2 == 0 else "Customer Request",
                "status": status,
                "refund_amount": _money(Decimal(contract["price"]) * (Decimal(1) - Decimal(i) / Decimal(10))),
                "workflow_history": workflow_history(status),
                "audit_log": audit_log,
            }
        )
    return tuple(cancellations)


_CONTRACTS = _build_contracts()

CATALOG: dict[str, tuple[Record, ...]] = {
    "Contract": _CONTRACTS,
    "Claim": _build_claims(_CONTRACTS),
    "Renewal": _build_renewals(_CONTRACTS),
    "Cancellation": _build_cancellations(_CONTRACTS),
}


def records_for(resource_type: str) -> tuple[Record, ...]:
    return CATALOG.get(resource_type, ())


def find_record(resource_type: str, record_id: str) -> Record | None:
    for record in records_for(resource_type):
        if record["id"] == record_id:
            return record
    return None
