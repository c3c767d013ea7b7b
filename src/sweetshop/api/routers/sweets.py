"""
sweetshop.api.routers.sweets

Inventory endpoints.

Responsibilities:
- List/search/read sweets for any signed-in user.
- Create/update/delete/restock for admins only.
- Purchase for any signed-in user.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from starlette.status import HTTP_201_CREATED

from sweetshop.api.deps import inventory_service_dep
from sweetshop.auth.deps import get_admin, get_principal
from sweetshop.auth.models import Principal
from sweetshop.db.repositories.inventory import SearchFilter
from sweetshop.services.inventory import MAX_QUANTITY, InventoryService

router = APIRouter(prefix="/api/sweets", tags=["sweets"])


class SweetCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    category: str = Field(min_length=1, max_length=128)
    price: float = Field(ge=0, allow_inf_nan=False)
    quantity: int = Field(default=0, ge=0, le=MAX_QUANTITY)


class SweetUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=256)
    category: str | None = Field(default=None, min_length=1, max_length=128)
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    quantity: int | None = Field(default=None, ge=0, le=MAX_QUANTITY)


class RestockRequest(BaseModel):
    quantity: int = Field(gt=0, le=MAX_QUANTITY)


class SweetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    category: str
    price: float
    quantity: int


@router.get("", response_model=list[SweetOut], dependencies=[Depends(get_principal)])
async def list_sweets(
    inventory: InventoryService = Depends(inventory_service_dep),
) -> list[SweetOut]:
    return [SweetOut.model_validate(s) for s in await inventory.list_all()]


@router.get("/search", response_model=list[SweetOut], dependencies=[Depends(get_principal)])
async def search_sweets(
    name: str | None = Query(default=None),
    category: str | None = Query(default=None),
    min_price: float | None = Query(default=None, alias="minPrice", ge=0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
    inventory: InventoryService = Depends(inventory_service_dep),
) -> list[SweetOut]:
    f = SearchFilter(name=name, category=category, min_price=min_price, max_price=max_price)
    return [SweetOut.model_validate(s) for s in await inventory.search(f)]


@router.get("/{item_id}", response_model=SweetOut, dependencies=[Depends(get_principal)])
async def get_sweet(
    item_id: uuid.UUID,
    inventory: InventoryService = Depends(inventory_service_dep),
) -> SweetOut:
    return SweetOut.model_validate(await inventory.get(item_id))


@router.post(
    "",
    response_model=SweetOut,
    status_code=HTTP_201_CREATED,
    dependencies=[Depends(get_admin)],
)
async def create_sweet(
    body: SweetCreateRequest,
    inventory: InventoryService = Depends(inventory_service_dep),
) -> SweetOut:
    item = await inventory.create(
        name=body.name, category=body.category, price=body.price, quantity=body.quantity
    )
    return SweetOut.model_validate(item)


@router.put("/{item_id}", response_model=SweetOut, dependencies=[Depends(get_admin)])
async def update_sweet(
    item_id: uuid.UUID,
    body: SweetUpdateRequest,
    inventory: InventoryService = Depends(inventory_service_dep),
) -> SweetOut:
    # Partial update: only fields present in the request body are replaced.
    fields = body.model_dump(exclude_unset=True)
    return SweetOut.model_validate(await inventory.update(item_id, fields))


@router.delete("/{item_id}", dependencies=[Depends(get_admin)])
async def delete_sweet(
    item_id: uuid.UUID,
    inventory: InventoryService = Depends(inventory_service_dep),
) -> dict[str, str]:
    await inventory.delete(item_id)
    return {"message": "Deleted"}


@router.post("/{item_id}/purchase", response_model=SweetOut)
async def purchase_sweet(
    item_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    inventory: InventoryService = Depends(inventory_service_dep),
) -> SweetOut:
    item = await inventory.purchase(item_id, actor=str(principal.account_id))
    return SweetOut.model_validate(item)


@router.post("/{item_id}/restock", response_model=SweetOut, dependencies=[Depends(get_admin)])
async def restock_sweet(
    item_id: uuid.UUID,
    body: RestockRequest,
    inventory: InventoryService = Depends(inventory_service_dep),
) -> SweetOut:
    return SweetOut.model_validate(await inventory.restock(item_id, body.quantity))


# --- Module Notes -----------------------------------------------------------
# `/search` is declared before `/{item_id}` so the literal path wins the route match.
