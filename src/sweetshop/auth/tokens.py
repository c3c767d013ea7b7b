"""
sweetshop.auth.tokens

Bearer token issuing and validation (TokenService).

Responsibilities:
- Issue signed, time-limited JWTs carrying an opaque subject (the account id).
- Verify signature, algorithm, issuer/audience and expiry without touching the DB.
- Check expiry against an injectable clock so lifetimes are testable.

Note:
- There is no revocation list. A token stays valid until `exp`; rotating the
  signing secret invalidates every outstanding token at once.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from sweetshop.settings import Settings

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str
    ttl: timedelta = timedelta(days=7)

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
            ttl=settings.token_ttl,
        )


class InvalidToken(Exception):
    pass


class TokenService:
    def __init__(self, cfg: JwtConfig, *, clock: Clock = _utcnow) -> None:
        self._cfg = cfg
        self._clock = clock

    def issue(self, subject: str, *, ttl: timedelta | None = None) -> str:
        now = self._clock()
        lifetime = ttl if ttl is not None else self._cfg.ttl
        # iat keeps sub-second precision: two tokens for one subject differ unless minted
        # at the same instant.
        payload: dict[str, Any] = {
            "iss": self._cfg.issuer,
            "aud": self._cfg.audience,
            "sub": subject,
            "iat": now.timestamp(),
            "exp": (now + lifetime).timestamp(),
        }
        return jwt.encode(payload, self._cfg.secret, algorithm=self._cfg.alg)

    def verify(self, token: str) -> str:
        try:
            # Temporal claims are checked below against our own clock, not PyJWT's.
            payload = jwt.decode(
                token,
                self._cfg.secret,
                algorithms=[self._cfg.alg],
                issuer=self._cfg.issuer,
                audience=self._cfg.audience,
                options={
                    "require": ["exp", "iat", "iss", "aud", "sub"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except InvalidTokenError as e:
            raise InvalidToken(str(e)) from e

        exp = payload["exp"]
        if not isinstance(exp, int | float) or isinstance(exp, bool):
            raise InvalidToken("Expiration Time claim (exp) must be a number")
        if self._clock().timestamp() >= exp:
            raise InvalidToken("Signature has expired")

        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            raise InvalidToken("Invalid token subject")
        return subject


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `api/routers/auth.py` (register/login); verification is used by
# `auth/gate.py` on every protected request.
