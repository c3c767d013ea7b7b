from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sweetshop.db.models import Account


class AccountRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        identity: str,
        display_name: str,
        password_hash: str,
        is_admin: bool,
    ) -> Account:
        # Flush surfaces the unique(identity) violation here rather than at commit.
        account = Account(
            identity=identity,
            display_name=display_name,
            password_hash=password_hash,
            is_admin=is_admin,
        )
        self._session.add(account)
        await self._session.flush()
        return account

    async def get(self, account_id: uuid.UUID) -> Account | None:
        return await self._session.get(Account, account_id)

    async def get_by_identity(self, identity: str) -> Account | None:
        stmt = select(Account).where(Account.identity == identity)
        return (await self._session.execute(stmt)).scalar_one_or_none()
