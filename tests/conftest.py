"""
tests.conftest

Shared fixtures.

Responsibilities:
- Build test Settings pointing at a per-test temporary SQLite file.
- Provide a ready sessionmaker for service-level tests.
- Provide an httpx client bound to the app (lifespan driven explicitly).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime, timedelta
from typing import Any

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sweetshop.api.app import create_app
from sweetshop.auth.tokens import JwtConfig, TokenService
from sweetshop.db.init_db import init_db
from sweetshop.db.models import InventoryItem
from sweetshop.db.session import create_engine, create_sessionmaker
from sweetshop.services.inventory import InventoryService
from sweetshop.settings import Settings

ADMIN_EMAIL = "admin@sweetshop.test"
TEST_SECRET = "test-secret-0123456789abcdef-0123456789abcdef"
PASSWORD = "correct horse battery"


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def settings(tmp_path) -> Settings:
    # File-backed SQLite: concurrent sessions get separate connections and real locking.
    return Settings(
        env="test",
        log_level="WARNING",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'sweetshop.db'}",
        database_timeout_seconds=30,
        jwt_secret=TEST_SECRET,
        admin_emails=ADMIN_EMAIL,
        bcrypt_rounds=4,
    )


@pytest.fixture
def tokens(settings: Settings) -> TokenService:
    return TokenService(JwtConfig.from_settings(settings))


@pytest_asyncio.fixture
async def sessionmaker(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield create_sessionmaker(engine)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=settings)

    # httpx ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


async def make_item(
    sm: async_sessionmaker[AsyncSession],
    *,
    name: str = "Laddu",
    category: str = "Indian",
    price: float = 50,
    quantity: int = 1,
) -> InventoryItem:
    async with sm() as session:
        return await InventoryService(session=session).create(
            name=name, category=category, price=price, quantity=quantity
        )


async def quantity_of(sm: async_sessionmaker[AsyncSession], item_id: Any) -> int:
    async with sm() as session:
        return (await InventoryService(session=session).get(item_id)).quantity


async def register(
    client: httpx.AsyncClient, email: str, *, name: str = "Test User", password: str = PASSWORD
) -> tuple[str, dict[str, Any]]:
    r = await client.post(
        "/api/auth/register", json={"email": email, "name": name, "password": password}
    )
    assert r.status_code == 201, r.text
    body = r.json()
    return body["token"], body["user"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
