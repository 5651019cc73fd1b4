from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class RuntimeSettings:
    env: str
    debug: bool
    secret_key: str
    allowed_hosts: tuple[str, ...]
    session_engine: str
    session_key: str
    default_dealership: str
    owner_placeholder_id: str
    identity_backfill: bool
    log_level: str


TRUE_VALUES = {"1", "true", "yes", "y", "on"}
DEFAULT_SECRET_KEY = "dev-not-secure-change-me"

SESSION_ENGINES = {
    "signed_cookies": "django.contrib.sessions.backends.signed_cookies",
    "db": "django.contrib.sessions.backends.db",
    "cache": "django.contrib.sessions.backends.cache",
}


def _env(name: str, default: str = "") -> str:
    return str(os.getenv(name, default)).strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name, "1" if default else "0").lower()
    return raw in TRUE_VALUES


def get_runtime_settings() -> RuntimeSettings:
    env = _env("PORTAL_ENV", "dev").lower()
    if env not in {"dev", "prod"}:
        env = "dev"

    hosts = tuple(
        host.strip()
        for host in _env("PORTAL_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
        if host.strip()
    )

    engine = _env("PORTAL_SESSION_ENGINE", "signed_cookies").lower()
    if engine not in SESSION_ENGINES:
        engine = "signed_cookies"

    return RuntimeSettings(
        env=env,
        debug=_env_bool("PORTAL_DEBUG", env != "prod"),
        secret_key=_env("PORTAL_SECRET_KEY", DEFAULT_SECRET_KEY),
        allowed_hosts=hosts,
        session_engine=engine,
        session_key=_env("PORTAL_SESSION_KEY", "current_principal") or "current_principal",
        default_dealership=_env("PORTAL_DEFAULT_DEALERSHIP", "Dealership A"),
        owner_placeholder_id=_env("PORTAL_OWNER_PLACEHOLDER_ID", "1"),
        identity_backfill=_env_bool("PORTAL_IDENTITY_BACKFILL", True),
        log_level=_env("PORTAL_LOG_LEVEL", "INFO").upper() or "INFO",
    )


def validate_runtime_settings(settings: RuntimeSettings) -> list[str]:
    issues: list[str] = []
    if settings.env == "prod" and (not settings.secret_key or settings.secret_key == DEFAULT_SECRET_KEY):
        issues.append("PORTAL_SECRET_KEY must be set to a non-default value in prod")

    if settings.env == "prod" and settings.identity_backfill:
        issues.append("PORTAL_IDENTITY_BACKFILL must be disabled in prod; issue identities at login instead")

    if settings.identity_backfill and not settings.owner_placeholder_id:
        issues.append("PORTAL_OWNER_PLACEHOLDER_ID is required while identity backfill is enabled")

    if not settings.default_dealership:
        issues.append("PORTAL_DEFAULT_DEALERSHIP is empty; dealership-scoped users will see no records")

    return issues
