import asyncio
import logging
from typing import Optional
from weakref import WeakValueDictionary

from sqlalchemy.orm import sessionmaker

from app.database import crud
from app.database.db import DB_ERRORS
from app.database.models import User
from app.errors import NegativeBalance, StoreUnavailable

logger = logging.getLogger(__name__)


class SqlLedger:
    """Per-user points balances on top of the ``users`` table.

    ``apply_delta`` is a single ``UPDATE ... SET points = points + delta``
    statement, so concurrent writers from other processes cannot lose an
    update. Within this process every mutation for one identity also goes
    through that identity's lock.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._locks: WeakValueDictionary = WeakValueDictionary()

    def _lock(self, user_id: int) -> asyncio.Lock:
        # запись живёт, пока лок кто-то держит или ждёт
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    async def get_or_create(self, user_id: int) -> User:
        async with self._lock(user_id):
            try:
                async with self._session_factory() as session:
                    return await crud.get_or_create_user(user_id, session)
            except DB_ERRORS as e:
                logger.error(f"get_or_create failed for {user_id}: {e}")
                raise StoreUnavailable(str(e)) from e

    async def apply_delta(self, user_id: int, delta: int) -> int:
        async with self._lock(user_id):
            try:
                async with self._session_factory() as session:
                    total = await crud.increment_points(user_id, delta, session)
                    if total is None:
                        await crud.get_or_create_user(user_id, session)
                        total = await crud.increment_points(user_id, delta, session)
                    if total is None:
                        await session.rollback()
                        raise NegativeBalance(f"delta {delta} would make balance of {user_id} negative")
                    await session.commit()
            except DB_ERRORS as e:
                logger.error(f"apply_delta({delta}) failed for {user_id}: {e}")
                raise StoreUnavailable(str(e)) from e

        logger.debug(f"User {user_id}: {delta:+d} -> {total}")
        return total

    async def lookup(self, user_id: int) -> Optional[int]:
        """Read-only balance, None for an unknown user. Never creates a row."""
        try:
            async with self._session_factory() as session:
                user = await crud.get_user(user_id, session)
        except DB_ERRORS as e:
            logger.error(f"lookup failed for {user_id}: {e}")
            raise StoreUnavailable(str(e)) from e
        return user.points if user else None
