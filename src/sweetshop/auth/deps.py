"""
sweetshop.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert an `Authorization: Bearer <token>` header into a typed `Principal`.
- Enforce the admin role as a reusable dependency chained after authentication.
"""

from __future__ import annotations

import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from sweetshop.api.deps import db_session, token_service_dep
from sweetshop.auth.gate import AuthGate, require_admin
from sweetshop.auth.models import Principal
from sweetshop.auth.tokens import TokenService
from sweetshop.db.models import Account
from sweetshop.db.repositories.accounts import AccountRepo
from sweetshop.services.store_errors import store_guard

# auto_error=False: a missing or non-bearer header yields None, reported as MissingCredential.
_bearer = HTTPBearer(auto_error=False)


async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    tokens: TokenService = Depends(token_service_dep),
    session: AsyncSession = Depends(db_session),
) -> Principal:
    accounts = AccountRepo(session)

    async def _lookup(account_id: uuid.UUID) -> Account | None:
        async with store_guard(session, op="resolve_principal"):
            account = await accounts.get(account_id)
            # End the read transaction; a later write must start its own so SQLite
            # waits on a busy lock instead of failing the upgrade.
            await session.commit()
            return account

    gate = AuthGate(tokens=tokens, lookup=_lookup)
    return await gate.authenticate(creds.credentials if creds is not None else None)


def get_admin(principal: Principal = Depends(get_principal)) -> Principal:
    return require_admin(principal)


# --- Module Notes -----------------------------------------------------------
# Routes use `Depends(get_principal)` for any signed-in user and `Depends(get_admin)` for
# admin-only operations; `get_admin` always runs after `get_principal`.
