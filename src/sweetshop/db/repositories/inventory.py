"""
sweetshop.db.repositories.inventory

Repository for `InventoryItem` entities ("sweets").

Responsibilities:
- CRUD and filtered search over the `sweets` table.
- Translate `SearchFilter` into SQL; callers never build query fragments.
- Express quantity mutation as single atomic conditional UPDATE statements.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sweetshop.db.models import InventoryItem


@dataclass(frozen=True, slots=True)
class SearchFilter:
    """
    Optional search criteria. `name` is a case-insensitive substring, `category` an
    exact match, price bounds are inclusive. Unset fields impose no constraint.
    """

    name: str | None = None
    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None

    @property
    def is_empty(self) -> bool:
        return (
            not self.name
            and not self.category
            and self.min_price is None
            and self.max_price is None
        )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class InventoryRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, *, name: str, category: str, price: float, quantity: int
    ) -> InventoryItem:
        item = InventoryItem(name=name, category=category, price=price, quantity=quantity)
        self._session.add(item)
        await self._session.flush()
        return item

    async def get(self, item_id: uuid.UUID) -> InventoryItem | None:
        return await self._session.get(InventoryItem, item_id)

    async def list_all(self) -> list[InventoryItem]:
        stmt = select(InventoryItem).order_by(InventoryItem.name)
        return list((await self._session.execute(stmt)).scalars().all())

    async def search(self, f: SearchFilter) -> list[InventoryItem]:
        stmt = select(InventoryItem)
        if f.name:
            stmt = stmt.where(InventoryItem.name.ilike(f"%{_escape_like(f.name)}%", escape="\\"))
        if f.category:
            stmt = stmt.where(InventoryItem.category == f.category)
        if f.min_price is not None:
            stmt = stmt.where(InventoryItem.price >= f.min_price)
        if f.max_price is not None:
            stmt = stmt.where(InventoryItem.price <= f.max_price)
        stmt = stmt.order_by(InventoryItem.name)
        return list((await self._session.execute(stmt)).scalars().all())

    async def patch(self, item_id: uuid.UUID, fields: dict[str, Any]) -> InventoryItem | None:
        # Row lock (where supported) so concurrent edits of the same record serialize.
        item = await self._session.get(InventoryItem, item_id, with_for_update=True)
        if item is None:
            return None
        for key, value in fields.items():
            setattr(item, key, value)
        await self._session.flush()
        return item

    async def delete(self, item_id: uuid.UUID) -> bool:
        stmt = delete(InventoryItem).where(InventoryItem.id == item_id).returning(InventoryItem.id)
        return (await self._session.execute(stmt)).scalar_one_or_none() is not None

    async def decrement_if_in_stock(self, item_id: uuid.UUID) -> InventoryItem | None:
        """
        Atomically `quantity -= 1` only when `quantity > 0`.

        Returns the post-decrement record, or None when the row is missing or out of
        stock. The check and the write are one statement, so two concurrent callers
        can never both take the last unit.
        """

        stmt = (
            update(InventoryItem)
            .where(InventoryItem.id == item_id, InventoryItem.quantity > 0)
            .values(quantity=InventoryItem.quantity - 1)
            .returning(InventoryItem)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def increment(
        self, item_id: uuid.UUID, amount: int, *, ceiling: int
    ) -> InventoryItem | None:
        # Atomic add: the new value is computed by the store, never from a stale read.
        # None when the row is missing or the sum would pass `ceiling`.
        stmt = (
            update(InventoryItem)
            .where(InventoryItem.id == item_id, InventoryItem.quantity <= ceiling - amount)
            .values(quantity=InventoryItem.quantity + amount)
            .returning(InventoryItem)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()


# --- Module Notes -----------------------------------------------------------
# Requires a backend with UPDATE ... RETURNING (SQLite >= 3.35, Postgres). A store without
# it must emulate the conditional update with a per-record lock or an optimistic retry loop.
