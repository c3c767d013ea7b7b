"""
sweetshop.services.store_errors

Transaction guard shared by the services.

Responsibilities:
- Roll back the session whenever a service operation fails.
- Translate infrastructure faults (driver errors, lock/pool timeouts) into the
  retryable `StoreUnavailable`, keeping them apart from business outcomes.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from sweetshop.errors import StoreUnavailable
from sweetshop.observability.logging import get_logger

log = get_logger(__name__)

_STORE_FAULTS = (OperationalError, InterfaceError, PoolTimeoutError, TimeoutError)


async def _rollback(session: AsyncSession) -> None:
    try:
        await session.rollback()
    except SQLAlchemyError:
        # The original failure is re-raised by the caller; a broken connection may refuse rollback.
        log.warning("rollback_failed", exc_info=True)


@asynccontextmanager
async def store_guard(session: AsyncSession, *, op: str) -> AsyncIterator[None]:
    try:
        yield
    except _STORE_FAULTS as e:
        await _rollback(session)
        log.warning("store_unavailable", op=op, error=str(e))
        raise StoreUnavailable() from e
    except Exception:
        await _rollback(session)
        raise


# --- Module Notes -----------------------------------------------------------
# A timed-out write has an unknown outcome; surfacing it as StoreUnavailable (HTTP 503) lets
# the client retry instead of reading it as "purchase succeeded" or "out of stock".
