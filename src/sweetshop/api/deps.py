"""
sweetshop.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and services.
- Encapsulate app.state access patterns (settings/engine/sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sweetshop.auth.passwords import BcryptPasswordHasher, PasswordHasher
from sweetshop.auth.tokens import JwtConfig, TokenService
from sweetshop.services.accounts import AccountService
from sweetshop.services.inventory import InventoryService
from sweetshop.settings import Settings


def settings_dep(request: Request) -> Settings:
    # Settings are attached in `sweetshop.api.app.create_app`.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the app lifespan (`sweetshop.api.app`).
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def token_service_dep(settings: Settings = Depends(settings_dep)) -> TokenService:
    return TokenService(JwtConfig.from_settings(settings))


def password_hasher_dep(settings: Settings = Depends(settings_dep)) -> PasswordHasher:
    return BcryptPasswordHasher(rounds=settings.bcrypt_rounds)


def account_service_dep(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    hasher: PasswordHasher = Depends(password_hasher_dep),
    tokens: TokenService = Depends(token_service_dep),
) -> AccountService:
    return AccountService(
        session=session,
        hasher=hasher,
        tokens=tokens,
        admin_identities=settings.admin_identities,
    )


def inventory_service_dep(session: AsyncSession = Depends(db_session)) -> InventoryService:
    return InventoryService(session=session)


# --- Module Notes -----------------------------------------------------------
# FastAPI caches dependencies per request, so the auth gate and the service share one session.
