import logging
from typing import Dict, Optional, Protocol

from sqlalchemy.orm import sessionmaker

from app.database import crud
from app.database.db import DB_ERRORS
from app.errors import StoreUnavailable
from app.models.task import PendingTask, TaskKind

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    async def get(self, user_id: int) -> Optional[PendingTask]: ...

    async def set(self, user_id: int, task: PendingTask) -> None: ...

    async def clear(self, user_id: int) -> None: ...


class MemorySessionStore:
    """Pending tasks in a plain dict. Lost when the process restarts."""

    def __init__(self):
        self._tasks: Dict[int, PendingTask] = {}

    async def get(self, user_id: int) -> Optional[PendingTask]:
        return self._tasks.get(user_id)

    async def set(self, user_id: int, task: PendingTask) -> None:
        self._tasks[user_id] = task

    async def clear(self, user_id: int) -> None:
        self._tasks.pop(user_id, None)


class SqlSessionStore:
    """Pending tasks in the ``pending_tasks`` table, one row per user."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def get(self, user_id: int) -> Optional[PendingTask]:
        try:
            async with self._session_factory() as session:
                row = await crud.get_pending_task(user_id, session)
        except DB_ERRORS as e:
            logger.error(f"Ошибка БД при чтении задачи {user_id}: {e}")
            raise StoreUnavailable(str(e)) from e
        if row is None:
            return None
        return PendingTask(TaskKind(row.kind), row.target)

    async def set(self, user_id: int, task: PendingTask) -> None:
        try:
            async with self._session_factory() as session:
                await crud.set_pending_task(user_id, task.kind.value, task.target, session)
        except DB_ERRORS as e:
            logger.error(f"Ошибка БД при сохранении задачи {user_id}: {e}")
            raise StoreUnavailable(str(e)) from e

    async def clear(self, user_id: int) -> None:
        try:
            async with self._session_factory() as session:
                await crud.clear_pending_task(user_id, session)
        except DB_ERRORS as e:
            logger.error(f"Ошибка БД при удалении задачи {user_id}: {e}")
            raise StoreUnavailable(str(e)) from e


def make_session_store(backend: str, session_factory: sessionmaker) -> SessionStore:
    if backend == "memory":
        return MemorySessionStore()
    if backend == "sql":
        return SqlSessionStore(session_factory)
    raise ValueError(f"Unknown session backend: {backend!r}")
