"""
sweetshop.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sweetshop.db.models import Account


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, resolved from a verified token.
    Carries no password material.
    """

    account_id: uuid.UUID
    identity: str
    display_name: str
    is_admin: bool

    @classmethod
    def from_account(cls, account: Account) -> Principal:
        return cls(
            account_id=account.id,
            identity=account.identity,
            display_name=account.display_name,
            is_admin=account.is_admin,
        )


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API and services.
