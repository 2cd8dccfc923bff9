import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from app.database.db import make_session_factory
from app.errors import StoreUnavailable
from app.models.task import PendingTask
from app.stores.sessions import MemorySessionStore, SqlSessionStore, make_session_store


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request, session_factory):
    return make_session_store(request.param, session_factory)


@pytest.mark.asyncio
async def test_empty_by_default(store):
    assert await store.get(1) is None


@pytest.mark.asyncio
async def test_set_get_clear(store):
    await store.set(1, PendingTask.guess(3))
    assert await store.get(1) == PendingTask.guess(3)
    await store.clear(1)
    assert await store.get(1) is None


@pytest.mark.asyncio
async def test_last_writer_wins(store):
    await store.set(1, PendingTask.video())
    await store.set(1, PendingTask.ad())
    assert await store.get(1) == PendingTask.ad()


@pytest.mark.asyncio
async def test_users_do_not_share_tasks(store):
    await store.set(1, PendingTask.video())
    await store.set(2, PendingTask.ad())
    await store.clear(1)
    assert await store.get(1) is None
    assert await store.get(2) == PendingTask.ad()


@pytest.mark.asyncio
async def test_clear_missing_is_noop(store):
    await store.clear(42)
    assert await store.get(42) is None


@pytest.mark.asyncio
async def test_only_sql_store_survives_a_new_instance(session_factory):
    await MemorySessionStore().set(1, PendingTask.video())
    assert await MemorySessionStore().get(1) is None
    await SqlSessionStore(session_factory).set(1, PendingTask.video())
    assert await SqlSessionStore(session_factory).get(1) == PendingTask.video()


def test_unknown_backend():
    with pytest.raises(ValueError):
        make_session_store("redis", None)


@pytest.mark.asyncio
async def test_sql_errors_are_wrapped(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    store = SqlSessionStore(make_session_factory(engine))
    try:
        with pytest.raises(StoreUnavailable):
            await store.get(1)
        with pytest.raises(StoreUnavailable):
            await store.set(1, PendingTask.ad())
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_connection_refused_is_wrapped(unreachable_session_factory):
    store = SqlSessionStore(unreachable_session_factory)
    with pytest.raises(StoreUnavailable):
        await store.get(1)
    with pytest.raises(StoreUnavailable):
        await store.set(1, PendingTask.video())
    with pytest.raises(StoreUnavailable):
        await store.clear(1)
