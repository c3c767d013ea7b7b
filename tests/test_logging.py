"""
tests.test_logging

Credential scrubbing in the structlog pipeline.
"""

from __future__ import annotations

from sweetshop.observability.logging import SENSITIVE_KEYS, redact_sensitive


def test_sensitive_fields_are_redacted() -> None:
    event = {
        "event": "login_failed",
        "password": "hunter2",
        "token": "eyJ.abc.def",
        "authorization": "Bearer eyJ.abc.def",
        "account_id": "1234",
    }

    out = redact_sensitive(None, "info", dict(event))

    for key in ("password", "token", "authorization"):
        assert out[key] == "[redacted]"
    assert out["account_id"] == "1234"
    assert out["event"] == "login_failed"


def test_password_hash_is_never_logged() -> None:
    assert "password_hash" in SENSITIVE_KEYS
    out = redact_sensitive(None, "info", {"event": "x", "password_hash": "$2b$12$abc"})
    assert out["password_hash"] == "[redacted]"
