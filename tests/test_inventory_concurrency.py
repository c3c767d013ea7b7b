"""
tests.test_inventory_concurrency

Competing purchases and restocks on one record, each in its own session/connection.
"""

from __future__ import annotations

import asyncio
import uuid

import pytest
from conftest import make_item, quantity_of
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sweetshop.db.models import InventoryItem
from sweetshop.errors import OutOfStock
from sweetshop.services.inventory import InventoryService


async def _purchase(sm: async_sessionmaker[AsyncSession], item_id: uuid.UUID) -> InventoryItem:
    async with sm() as session:
        return await InventoryService(session=session).purchase(item_id)


async def _restock(
    sm: async_sessionmaker[AsyncSession], item_id: uuid.UUID, amount: int
) -> InventoryItem:
    async with sm() as session:
        return await InventoryService(session=session).restock(item_id, amount)


@pytest.mark.asyncio
async def test_concurrent_purchases_never_oversell(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> None:
    stock, buyers = 5, 12
    item = await make_item(sessionmaker, quantity=stock)

    results = await asyncio.gather(
        *(_purchase(sessionmaker, item.id) for _ in range(buyers)), return_exceptions=True
    )

    sold = [r for r in results if isinstance(r, InventoryItem)]
    rejected = [r for r in results if isinstance(r, OutOfStock)]
    assert len(sold) == stock
    assert len(rejected) == buyers - stock
    assert len(sold) + len(rejected) == buyers

    # Every successful purchase observed a distinct post-decrement value.
    assert sorted(r.quantity for r in sold) == list(range(stock))
    assert await quantity_of(sessionmaker, item.id) == 0


@pytest.mark.asyncio
async def test_single_unit_goes_to_exactly_one_buyer(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> None:
    item = await make_item(sessionmaker, quantity=1)

    results = await asyncio.gather(
        _purchase(sessionmaker, item.id), _purchase(sessionmaker, item.id), return_exceptions=True
    )

    assert sum(isinstance(r, InventoryItem) for r in results) == 1
    assert sum(isinstance(r, OutOfStock) for r in results) == 1
    assert await quantity_of(sessionmaker, item.id) == 0


@pytest.mark.asyncio
async def test_concurrent_restocks_are_all_applied(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> None:
    start, workers, amount = 3, 10, 7
    item = await make_item(sessionmaker, quantity=start)

    await asyncio.gather(*(_restock(sessionmaker, item.id, amount) for _ in range(workers)))

    assert await quantity_of(sessionmaker, item.id) == start + workers * amount


@pytest.mark.asyncio
async def test_interleaved_restock_and_purchases_conserve_stock(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> None:
    item = await make_item(sessionmaker, quantity=2)

    results = await asyncio.gather(
        *(_purchase(sessionmaker, item.id) for _ in range(6)),
        _restock(sessionmaker, item.id, 3),
        return_exceptions=True,
    )

    purchases = results[:6]
    sold = sum(isinstance(r, InventoryItem) for r in purchases)
    assert all(isinstance(r, InventoryItem | OutOfStock) for r in purchases)
    assert isinstance(results[6], InventoryItem)
    # Stock is conserved: initial + restocked - sold, and never negative.
    assert 2 <= sold <= 5
    assert await quantity_of(sessionmaker, item.id) == 2 + 3 - sold
