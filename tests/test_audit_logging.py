from __future__ import annotations

import logging

from fastapi.testclient import TestClient

from casbin_gate.core import audit_logging
from casbin_gate.core.config import settings
from casbin_gate.main import create_app


def test_audit_disabled_by_default(caplog):
    with caplog.at_level(logging.INFO, logger="casbin_gate.audit"):
        audit_logging.audit_success("admin", "/admin", "GET")
    assert caplog.records == []


def test_audit_success_and_failure_logged_when_enabled(monkeypatch, caplog):
    monkeypatch.setattr(settings, "AUTHZ_AUDIT_ENABLED", True)
    with caplog.at_level(logging.INFO, logger="casbin_gate.audit"):
        audit_logging.audit_success("admin", "/admin", "GET")
        audit_logging.audit_failure(("any", "user"), "/admin", "GET")

    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "casbin_decision outcome=allow role=admin obj=/admin act=GET",
        "casbin_decision outcome=deny roles=['any', 'user'] obj=/admin act=GET",
    ]


def test_audit_sample_rate_zero_suppresses(monkeypatch, caplog):
    monkeypatch.setattr(settings, "AUTHZ_AUDIT_ENABLED", True)
    monkeypatch.setattr(settings, "AUTHZ_AUDIT_SAMPLE_RATE", 0.0)
    with caplog.at_level(logging.INFO, logger="casbin_gate.audit"):
        audit_logging.audit_success("admin", "/admin", "GET")
    assert caplog.records == []


def test_audit_sample_rate_uses_random(monkeypatch, caplog):
    monkeypatch.setattr(settings, "AUTHZ_AUDIT_ENABLED", True)
    monkeypatch.setattr(settings, "AUTHZ_AUDIT_SAMPLE_RATE", 0.5)
    monkeypatch.setattr(audit_logging.random, "random", lambda: 0.9)
    with caplog.at_level(logging.INFO, logger="casbin_gate.audit"):
        audit_logging.audit_success("admin", "/admin", "GET")
    assert caplog.records == []

    monkeypatch.setattr(audit_logging.random, "random", lambda: 0.1)
    with caplog.at_level(logging.INFO, logger="casbin_gate.audit"):
        audit_logging.audit_success("admin", "/admin", "GET")
    assert len(caplog.records) == 1


def test_app_decisions_are_audited(monkeypatch, caplog, casbin_enforcer):
    monkeypatch.setattr(settings, "AUTHZ_AUDIT_ENABLED", True)
    monkeypatch.setattr(settings, "CASBIN_ROLES_HEADER_ENABLED", True)
    app = create_app(casbin_enforcer)
    with caplog.at_level(logging.INFO, logger="casbin_gate.audit"):
        with TestClient(app) as client:
            assert client.put("/user", headers={"X-Roles": "user,admin"}).status_code == 200
            assert client.get("/admin", headers={"X-Roles": "user"}).status_code == 403

    messages = [
        record.getMessage() for record in caplog.records if record.name == "casbin_gate.audit"
    ]
    assert messages == [
        "casbin_decision outcome=allow role=admin obj=/user act=PUT",
        "casbin_decision outcome=deny roles=['user'] obj=/admin act=GET",
    ]
