"""
sweetshop.errors

Domain error taxonomy.

Responsibilities:
- Define the expected, recoverable outcomes raised by services and the auth gate.
- Give each outcome a stable machine-checkable `kind`.
- Keep infrastructure failures (`StoreUnavailable`) distinct from business outcomes.

HTTP status mapping lives in `sweetshop.api.errors`; nothing here knows about HTTP.
"""

from __future__ import annotations

from typing import ClassVar


class ShopError(Exception):
    kind: ClassVar[str] = "InternalError"
    default_message: ClassVar[str] = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ShopError):
    kind = "ValidationError"
    default_message = "Invalid input"


class DuplicateIdentity(ShopError):
    kind = "DuplicateIdentity"
    default_message = "Email already used"


class DuplicateName(ShopError):
    kind = "DuplicateName"
    default_message = "A sweet with this name already exists"


class MissingCredential(ShopError):
    kind = "MissingCredential"
    default_message = "Missing bearer token"


class InvalidCredential(ShopError):
    kind = "InvalidCredential"
    default_message = "Invalid credentials"


class PrincipalNotFound(InvalidCredential):
    # Surfaced to callers as InvalidCredential; the subclass only helps logging/tests.
    default_message = "Invalid token"


class Forbidden(ShopError):
    kind = "Forbidden"
    default_message = "Admin only"


class NotFound(ShopError):
    kind = "NotFound"
    default_message = "Not found"


class OutOfStock(ShopError):
    kind = "OutOfStock"
    default_message = "Out of stock"


class StoreUnavailable(ShopError):
    """
    The backing store failed or timed out. The outcome of the attempted write is
    unknown to the caller, who may retry.
    """

    kind = "StoreUnavailable"
    default_message = "Store temporarily unavailable, retry later"


# --- Module Notes -----------------------------------------------------------
# Keep `kind` values stable: clients branch on them (e.g. OutOfStock vs NotFound).
