"""
sweetshop.services.inventory

Inventory lifecycle service (transaction + persistence owner for sweets).

Responsibilities:
- Validate and perform create/list/search/get/update/delete.
- Run the quantity state machine: purchase (decrement by one, never below zero) and
  restock (atomic increment by a positive amount).
- Commit on success; roll back and surface a stable error kind on failure.

Role checks are not done here: the API layer applies `require_admin` before calling
admin-only operations.
"""

from __future__ import annotations

import math
import uuid
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sweetshop.db.models import InventoryItem
from sweetshop.db.repositories.inventory import InventoryRepo, SearchFilter
from sweetshop.errors import DuplicateName, NotFound, OutOfStock, ValidationError
from sweetshop.observability.logging import get_logger
from sweetshop.services.store_errors import store_guard

log = get_logger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "category", "price", "quantity"})

# Stock ceiling; keeps quantity well inside the store's integer range.
MAX_QUANTITY = 2**31 - 1


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def _validate_price(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError("price must be a number")
    if not math.isfinite(value) or value < 0:
        raise ValidationError("price must be a non-negative number")
    return float(value)


def _validate_quantity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("quantity must be an integer")
    if value < 0:
        raise ValidationError("quantity must be non-negative")
    if value > MAX_QUANTITY:
        raise ValidationError(f"quantity must be at most {MAX_QUANTITY}")
    return value


class InventoryService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._items = InventoryRepo(session)

    async def create(
        self, *, name: Any, category: Any, price: Any, quantity: Any = 0
    ) -> InventoryItem:
        name = _require_text(name, "name")
        category = _require_text(category, "category")
        price = _validate_price(price)
        quantity = _validate_quantity(quantity)

        async with store_guard(self._session, op="create"):
            try:
                item = await self._items.create(
                    name=name, category=category, price=price, quantity=quantity
                )
            except IntegrityError as e:
                raise DuplicateName() from e
            await self._session.commit()

        log.info("sweet_created", item_id=str(item.id), name=item.name, quantity=item.quantity)
        return item

    async def list_all(self) -> list[InventoryItem]:
        async with store_guard(self._session, op="list"):
            return await self._items.list_all()

    async def search(self, f: SearchFilter) -> list[InventoryItem]:
        for bound in (f.min_price, f.max_price):
            if bound is not None and (not math.isfinite(bound) or bound < 0):
                raise ValidationError("price bounds must be non-negative numbers")
        if f.is_empty:
            return await self.list_all()
        async with store_guard(self._session, op="search"):
            return await self._items.search(f)

    async def get(self, item_id: uuid.UUID) -> InventoryItem:
        async with store_guard(self._session, op="get"):
            item = await self._items.get(item_id)
        if item is None:
            raise NotFound("Sweet not found")
        return item

    async def update(self, item_id: uuid.UUID, fields: dict[str, Any]) -> InventoryItem:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"unknown fields: {', '.join(sorted(unknown))}")

        patch: dict[str, Any] = {}
        if "name" in fields:
            patch["name"] = _require_text(fields["name"], "name")
        if "category" in fields:
            patch["category"] = _require_text(fields["category"], "category")
        if "price" in fields:
            patch["price"] = _validate_price(fields["price"])
        if "quantity" in fields:
            patch["quantity"] = _validate_quantity(fields["quantity"])

        async with store_guard(self._session, op="update"):
            try:
                item = await self._items.patch(item_id, patch)
            except IntegrityError as e:
                raise DuplicateName() from e
            if item is None:
                raise NotFound("Sweet not found")
            await self._session.commit()

        log.info("sweet_updated", item_id=str(item_id), fields=sorted(patch))
        return item

    async def delete(self, item_id: uuid.UUID) -> None:
        async with store_guard(self._session, op="delete"):
            if not await self._items.delete(item_id):
                raise NotFound("Sweet not found")
            await self._session.commit()
        log.info("sweet_deleted", item_id=str(item_id))

    async def purchase(self, item_id: uuid.UUID, *, actor: str | None = None) -> InventoryItem:
        """
        Decrement stock by exactly one.

        InStock(n > 0) -> n - 1; Empty(0) -> OutOfStock with no mutation; missing -> NotFound.
        """

        async with store_guard(self._session, op="purchase"):
            item = await self._items.decrement_if_in_stock(item_id)
            if item is None:
                # Nothing was written; only decide which failure to report.
                if await self._items.get(item_id) is None:
                    raise NotFound("Sweet not found")
                log.info("purchase_rejected", item_id=str(item_id), actor=actor)
                raise OutOfStock()
            await self._session.commit()

        # Purchases are not attributed in the data model; the actor is only logged.
        log.info("sweet_purchased", item_id=str(item_id), quantity=item.quantity, actor=actor)
        return item

    async def restock(self, item_id: uuid.UUID, amount: Any) -> InventoryItem:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("quantity must be a positive integer")
        if amount > MAX_QUANTITY:
            raise ValidationError(f"quantity must be at most {MAX_QUANTITY}")

        async with store_guard(self._session, op="restock"):
            item = await self._items.increment(item_id, amount, ceiling=MAX_QUANTITY)
            if item is None:
                if await self._items.get(item_id) is None:
                    raise NotFound("Sweet not found")
                raise ValidationError(f"restock would exceed {MAX_QUANTITY} units")
            await self._session.commit()

        log.info("sweet_restocked", item_id=str(item_id), amount=amount, quantity=item.quantity)
        return item


# --- Module Notes -----------------------------------------------------------
# No application lock around purchase/restock: each is one conditional
# UPDATE and the store serializes competing writers on the same row.
