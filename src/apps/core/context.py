from __future__ import annotations

from apps.core.services.policy_engine import DecisionEngine

# (screen resource type, label, path); path is None for screens this service does not serve
NAVIGATION_ITEMS: tuple[tuple[str, str, str | None], ...] = (
    ("Dashboard", "Dashboard", "/api/v1/dashboard"),
    ("ContractList", "Contracts", "/api/v1/records/Contract"),
    ("ClaimList", "Claims", "/api/v1/records/Claim"),
    ("RenewalList", "Renewals", "/api/v1/records/Renewal"),
    ("CancellationList", "Cancellations", "/api/v1/records/Cancellation"),
    ("AuditLogs", "Audit Logs", "/api/v1/audit-logs"),
    ("Reports", "Reports", None),
    ("SystemSettings", "System Settings", None),
)


def visible_navigation(engine: DecisionEngine) -> list[dict[str, str | None]]:
    return [
        {"screen": screen, "label": label, "path": path}
        for screen, label, path in NAVIGATION_ITEMS
        if engine.decide(screen)
    ]
