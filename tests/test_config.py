from __future__ import annotations

from dataclasses import replace

import pytest

from apps.core.config.env import DEFAULT_SECRET_KEY, get_runtime_settings, validate_runtime_settings

PORTAL_VARS = (
    "PORTAL_ENV",
    "PORTAL_DEBUG",
    "PORTAL_SECRET_KEY",
    "PORTAL_ALLOWED_HOSTS",
    "PORTAL_SESSION_ENGINE",
    "PORTAL_SESSION_KEY",
    "PORTAL_DEFAULT_DEALERSHIP",
    "PORTAL_OWNER_PLACEHOLDER_ID",
    "PORTAL_IDENTITY_BACKFILL",
    "PORTAL_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in PORTAL_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    runtime = get_runtime_settings()
    assert runtime.env == "dev"
    assert runtime.debug is True
    assert runtime.secret_key == DEFAULT_SECRET_KEY
    assert runtime.session_engine == "signed_cookies"
    assert runtime.session_key == "current_principal"
    assert runtime.default_dealership == "Dealership A"
    assert runtime.owner_placeholder_id == "1"
    assert runtime.identity_backfill is True
    assert runtime.log_level == "INFO"
    assert "testserver" in runtime.allowed_hosts
    assert validate_runtime_settings(runtime) == []


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("PORTAL_SESSION_ENGINE", "DB")
    monkeypatch.setenv("PORTAL_DEFAULT_DEALERSHIP", "Dealership B")
    monkeypatch.setenv("PORTAL_IDENTITY_BACKFILL", "off")
    monkeypatch.setenv("PORTAL_ALLOWED_HOSTS", "portal.example.com, ,api.example.com")
    monkeypatch.setenv("PORTAL_LOG_LEVEL", "debug")

    runtime = get_runtime_settings()
    assert runtime.session_engine == "db"
    assert runtime.default_dealership == "Dealership B"
    assert runtime.identity_backfill is False
    assert runtime.allowed_hosts == ("portal.example.com", "api.example.com")
    assert runtime.log_level == "DEBUG"


def test_unknown_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("PORTAL_ENV", "staging")
    monkeypatch.setenv("PORTAL_SESSION_ENGINE", "redis")
    monkeypatch.setenv("PORTAL_SESSION_KEY", "  ")

    runtime = get_runtime_settings()
    assert runtime.env == "dev"
    assert runtime.session_engine == "signed_cookies"
    assert runtime.session_key == "current_principal"


def test_prod_flags_default_secret_and_backfill(monkeypatch) -> None:
    monkeypatch.setenv("PORTAL_ENV", "prod")
    runtime = get_runtime_settings()
    assert runtime.debug is False

    issues = validate_runtime_settings(runtime)
    assert any("PORTAL_SECRET_KEY" in issue for issue in issues)
    assert any("PORTAL_IDENTITY_BACKFILL" in issue for issue in issues)


def test_prod_with_real_secret_and_no_backfill_is_clean(monkeypatch) -> None:
    monkeypatch.setenv("PORTAL_ENV", "prod")
    monkeypatch.setenv("PORTAL_SECRET_KEY", "a-real-secret")
    monkeypatch.setenv("PORTAL_IDENTITY_BACKFILL", "0")
    assert validate_runtime_settings(get_runtime_settings()) == []


def test_backfill_requires_placeholder_and_dealership_must_be_set() -> None:
    runtime = replace(get_runtime_settings(), owner_placeholder_id="", default_dealership="")
    issues = validate_runtime_settings(runtime)
    assert any("PORTAL_OWNER_PLACEHOLDER_ID" in issue for issue in issues)
    assert any("PORTAL_DEFAULT_DEALERSHIP" in issue for issue in issues)
