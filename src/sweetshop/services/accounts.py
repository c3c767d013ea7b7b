"""
sweetshop.services.accounts

Registration and login (transaction + persistence owner for accounts).

Responsibilities:
- Register accounts, deciding `is_admin` once from the injected allow-list.
- Authenticate identity + password and issue a bearer token.
- Never store or log raw passwords; never distinguish unknown identity from bad password.
"""

from __future__ import annotations

import asyncio

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sweetshop.auth.passwords import PasswordHasher
from sweetshop.auth.tokens import TokenService
from sweetshop.db.models import Account
from sweetshop.db.repositories.accounts import AccountRepo
from sweetshop.errors import DuplicateIdentity, InvalidCredential, ValidationError
from sweetshop.observability.logging import get_logger
from sweetshop.services.store_errors import store_guard
from sweetshop.settings import normalize_identity

log = get_logger(__name__)


class AccountService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        hasher: PasswordHasher,
        tokens: TokenService,
        admin_identities: frozenset[str],
    ) -> None:
        self._session = session
        self._hasher = hasher
        self._tokens = tokens
        self._admin_identities = frozenset(normalize_identity(i) for i in admin_identities)
        self._accounts = AccountRepo(session)

    def is_admin_identity(self, identity: str) -> bool:
        # Pure function of (identity, config); evaluated only at registration.
        return normalize_identity(identity) in self._admin_identities

    async def register(self, *, identity: str, display_name: str, raw_password: str) -> Account:
        identity = normalize_identity(identity)
        display_name = display_name.strip()
        if not identity:
            raise ValidationError("Email is required")
        if not display_name:
            raise ValidationError("Name is required")
        if not raw_password:
            raise ValidationError("Password is required")

        async with store_guard(self._session, op="register"):
            if await self._accounts.get_by_identity(identity) is not None:
                raise DuplicateIdentity()

            password_hash = await asyncio.to_thread(self._hasher.hash, raw_password)
            try:
                account = await self._accounts.create(
                    identity=identity,
                    display_name=display_name,
                    password_hash=password_hash,
                    is_admin=self.is_admin_identity(identity),
                )
            except IntegrityError as e:
                # Lost a race with a concurrent registration of the same identity.
                raise DuplicateIdentity() from e
            await self._session.commit()

        log.info("account_registered", account_id=str(account.id), is_admin=account.is_admin)
        return account

    async def login(self, *, identity: str, raw_password: str) -> tuple[str, Account]:
        identity = normalize_identity(identity)
        async with store_guard(self._session, op="login"):
            account = await self._accounts.get_by_identity(identity)

        if account is None:
            # Same bcrypt cost as a wrong password, so response time does not reveal
            # whether the identity exists.
            await asyncio.to_thread(self._verify_decoy, raw_password)
            log.info("login_failed")
            raise InvalidCredential("Invalid credentials")
        if not await asyncio.to_thread(self._hasher.verify, raw_password, account.password_hash):
            log.info("login_failed")
            raise InvalidCredential("Invalid credentials")

        log.info("login_succeeded", account_id=str(account.id))
        return self.issue_token(account), account

    def _verify_decoy(self, raw_password: str) -> None:
        self._hasher.verify(raw_password, self._hasher.decoy_hash())

    def issue_token(self, account: Account) -> str:
        return self._tokens.issue(str(account.id))


# --- Module Notes -----------------------------------------------------------
# `is_admin` is immutable after registration: changing the allow-list only affects accounts
# registered afterwards.
