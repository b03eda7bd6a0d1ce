from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from casbin_gate.core.config import settings
from casbin_gate.services.enforcer_factory import build_enforcer

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class RecordingEnforcer:
    """Wraps an enforcer and records every enforce() call."""

    def __init__(self, inner=None, *, allow=None, error_on=None):
        self.inner = inner
        self.allow = allow
        self.error_on = set(error_on or ())
        self.calls: list[tuple[str, str, str]] = []

    def enforce(self, sub, obj, act):
        self.calls.append((sub, obj, act))
        if sub in self.error_on:
            raise ValueError(f"policy evaluation failed for {sub}")
        if self.inner is not None:
            return self.inner.enforce(sub, obj, act)
        return bool(self.allow and (sub, obj, act) in self.allow)


@pytest.fixture(scope="session")
def casbin_enforcer():
    return build_enforcer(
        model_path=FIXTURES / "model.conf",
        policy_path=FIXTURES / "policy.csv",
    )


@pytest.fixture
def recording_enforcer(casbin_enforcer):
    return RecordingEnforcer(casbin_enforcer)


@pytest.fixture
def enforcer_factory():
    return RecordingEnforcer


@pytest.fixture(autouse=True)
def _default_gate_runtime(monkeypatch):
    monkeypatch.setattr(settings, "CASBIN_CONTEXT_KEY", "")
    monkeypatch.setattr(settings, "CASBIN_DEFAULT_ROLE", "")
    monkeypatch.setattr(settings, "CASBIN_ROLES_HEADER_ENABLED", False)
    monkeypatch.setattr(settings, "CASBIN_ROLES_HEADER", "")
    monkeypatch.setattr(settings, "CASBIN_FORBIDDEN_MESSAGE", "")
    monkeypatch.setattr(settings, "CASBIN_SKIP_PATHS", "/health")
    monkeypatch.setattr(settings, "CASBIN_REMOTE_ENGINE_URL", "")
    monkeypatch.setattr(settings, "AUTHZ_AUDIT_ENABLED", False)
    monkeypatch.setattr(settings, "AUTHZ_AUDIT_SAMPLE_RATE", 1.0)
