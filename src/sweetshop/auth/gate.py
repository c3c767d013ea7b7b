"""
sweetshop.auth.gate

Request authentication gate (framework independent).

Responsibilities:
- Turn an optional bearer token into a resolved `Principal`:
  Unauthenticated -> TokenPresent -> TokenVerified -> PrincipalResolved.
- Provide the composable admin check applied after resolution.

The FastAPI bindings live in `sweetshop.auth.deps`.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable

from sweetshop.auth.models import Principal
from sweetshop.auth.tokens import InvalidToken, TokenService
from sweetshop.db.models import Account
from sweetshop.errors import Forbidden, InvalidCredential, MissingCredential, PrincipalNotFound
from sweetshop.observability.logging import get_logger

log = get_logger(__name__)

AccountLookup = Callable[[uuid.UUID], Awaitable[Account | None]]


class AuthGate:
    def __init__(self, *, tokens: TokenService, lookup: AccountLookup) -> None:
        self._tokens = tokens
        self._lookup = lookup

    async def authenticate(self, token: str | None) -> Principal:
        if not token:
            raise MissingCredential()

        try:
            subject = self._tokens.verify(token)
        except InvalidToken as e:
            log.info("token_rejected", reason=str(e))
            raise InvalidCredential("Invalid token") from e

        try:
            account_id = uuid.UUID(subject)
        except ValueError as e:
            raise InvalidCredential("Invalid token subject") from e

        account = await self._lookup(account_id)
        if account is None:
            # Signed and unexpired, but the account is gone.
            log.info("token_subject_unknown", account_id=subject)
            raise PrincipalNotFound()
        return Principal.from_account(account)


def require_admin(principal: Principal | None) -> Principal:
    if principal is None:
        raise RuntimeError("require_admin called before the principal was resolved")
    if not principal.is_admin:
        raise Forbidden()
    return principal


# --- Module Notes -----------------------------------------------------------
# Token verification never touches the DB; the single account lookup happens here, after the
# signature and expiry checks have passed.
