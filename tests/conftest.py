from __future__ import annotations

import os
import sys
from pathlib import Path

import django
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "contractportal.settings")
django.setup()


@pytest.fixture(autouse=True)
def _reset_metrics():
    from apps.core.observability import METRICS

    METRICS.reset()
    yield
    METRICS.reset()


class StubPrincipals:
    """Principal source for exercising the decision engine without a session."""

    def __init__(self, principal=None) -> None:
        self.principal = principal

    def current_principal(self):
        return self.principal


@pytest.fixture
def principals() -> StubPrincipals:
    return StubPrincipals()
