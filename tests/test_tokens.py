"""
tests.test_tokens

TokenService issuing/verification with a controllable clock.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from conftest import TEST_SECRET, FakeClock

from sweetshop.auth.tokens import InvalidToken, JwtConfig, TokenService

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


def _cfg(secret: str = TEST_SECRET, **overrides) -> JwtConfig:
    base = dict(
        alg="HS256",
        issuer="sweetshop",
        audience="sweetshop-api",
        secret=secret,
        ttl=timedelta(days=7),
    )
    base.update(overrides)
    return JwtConfig(**base)


def test_issued_token_verifies_before_expiry_and_fails_after() -> None:
    clock = FakeClock(T0)
    svc = TokenService(_cfg(), clock=clock)
    token = svc.issue("acct-1")

    assert svc.verify(token) == "acct-1"

    clock.advance(timedelta(days=7) - timedelta(seconds=1))
    assert svc.verify(token) == "acct-1"

    # Expiry is exclusive: at exactly exp the token is no longer valid.
    clock.advance(timedelta(seconds=1))
    with pytest.raises(InvalidToken):
        svc.verify(token)


def test_custom_ttl_overrides_default_lifetime() -> None:
    clock = FakeClock(T0)
    svc = TokenService(_cfg(), clock=clock)
    token = svc.issue("acct-1", ttl=timedelta(minutes=5))

    clock.advance(timedelta(minutes=5))
    with pytest.raises(InvalidToken):
        svc.verify(token)


def test_token_signed_with_other_secret_is_rejected() -> None:
    clock = FakeClock(T0)
    foreign = TokenService(_cfg(secret="another-secret-0123456789abcdef-0123456789"), clock=clock)
    svc = TokenService(_cfg(), clock=clock)

    with pytest.raises(InvalidToken):
        svc.verify(foreign.issue("acct-1"))


def test_rotating_secret_invalidates_outstanding_tokens() -> None:
    clock = FakeClock(T0)
    token = TokenService(_cfg(), clock=clock).issue("acct-1")
    rotated = TokenService(_cfg(secret="rotated-secret-0123456789abcdef-012345678"), clock=clock)

    with pytest.raises(InvalidToken):
        rotated.verify(token)


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c", "Bearer x.y.z"])
def test_malformed_token_is_rejected(garbage: str) -> None:
    svc = TokenService(_cfg(), clock=FakeClock(T0))
    with pytest.raises(InvalidToken):
        svc.verify(garbage)


def test_wrong_audience_or_issuer_is_rejected() -> None:
    clock = FakeClock(T0)
    svc = TokenService(_cfg(), clock=clock)

    other_aud = TokenService(_cfg(audience="someone-else"), clock=clock).issue("acct-1")
    other_iss = TokenService(_cfg(issuer="someone-else"), clock=clock).issue("acct-1")

    with pytest.raises(InvalidToken):
        svc.verify(other_aud)
    with pytest.raises(InvalidToken):
        svc.verify(other_iss)


def test_unsigned_token_is_rejected() -> None:
    payload = {
        "iss": "sweetshop",
        "aud": "sweetshop-api",
        "sub": "acct-1",
        "iat": T0.timestamp(),
        "exp": (T0 + timedelta(days=1)).timestamp(),
    }
    forged = jwt.encode(payload, key=None, algorithm="none")
    svc = TokenService(_cfg(), clock=FakeClock(T0))

    with pytest.raises(InvalidToken):
        svc.verify(forged)


def test_token_missing_subject_is_rejected() -> None:
    payload = {
        "iss": "sweetshop",
        "aud": "sweetshop-api",
        "iat": T0.timestamp(),
        "exp": (T0 + timedelta(days=1)).timestamp(),
    }
    token = jwt.encode(payload, TEST_SECRET, algorithm="HS256")
    svc = TokenService(_cfg(), clock=FakeClock(T0))

    with pytest.raises(InvalidToken):
        svc.verify(token)


def test_issue_is_deterministic_per_instant_and_distinct_across_instants() -> None:
    clock = FakeClock(T0)
    svc = TokenService(_cfg(), clock=clock)

    first = svc.issue("acct-1")
    assert svc.issue("acct-1") == first

    clock.advance(timedelta(microseconds=1))
    assert svc.issue("acct-1") != first


def test_verify_uses_injected_clock_not_wall_clock() -> None:
    # Issued and checked far in the future: still valid because both use the same clock.
    future = FakeClock(datetime(2099, 6, 1, tzinfo=UTC))
    svc = TokenService(_cfg(), clock=future)
    assert svc.verify(svc.issue("acct-1")) == "acct-1"
