"""
sweetshop.auth.passwords

One-way password hashing.

Responsibilities:
- Define the pluggable hasher interface used by registration/login.
- Provide the default bcrypt implementation (per-record salt embedded in the digest).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Protocol

import bcrypt

from sweetshop.errors import ValidationError

# bcrypt only considers the first 72 bytes; newer releases reject longer inputs outright.
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher(Protocol):
    def hash(self, raw_password: str) -> str: ...

    def verify(self, raw_password: str, password_hash: str) -> bool: ...

    def decoy_hash(self) -> str: ...


@lru_cache(maxsize=8)
def _decoy_digest(rounds: int) -> str:
    # Matches no real password; verified against when the identity is unknown.
    return bcrypt.hashpw(b"sweetshop-decoy", bcrypt.gensalt(rounds=rounds)).decode("ascii")


class BcryptPasswordHasher:
    def __init__(self, *, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, raw_password: str) -> str:
        encoded = raw_password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes"
            )
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    def verify(self, raw_password: str, password_hash: str) -> bool:
        encoded = raw_password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("ascii"))
        except ValueError:
            # Malformed stored digest: treat as a mismatch.
            return False

    def decoy_hash(self) -> str:
        return _decoy_digest(self._rounds)


# --- Module Notes -----------------------------------------------------------
# bcrypt is CPU-bound; async callers run these methods via `asyncio.to_thread`.
