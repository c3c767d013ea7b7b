"""
sweetshop.db.models

Core persistence schema for the shop.

Responsibilities:
- Define ORM models for the two independent aggregate roots:
  - Account: credential record (identity, password hash, admin flag)
  - InventoryItem: stock-keeping record ("sweet") with a non-negative quantity
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, CheckConstraint, Float, Integer, String, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from sweetshop.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Normalized email; immutable after registration.
    identity: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(256), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        # Never include password_hash.
        return f"Account(id={self.id!s}, identity={self.identity!r}, is_admin={self.is_admin})"


class InventoryItem(Base):
    __tablename__ = "sweets"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)
    category: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
        CheckConstraint("price >= 0", name="price_non_negative"),
    )


# --- Module Notes -----------------------------------------------------------
# The CHECK constraints back up the service-level invariants; the atomic conditional
# UPDATEs in `repositories.inventory` are what keep concurrent purchases from racing.
