# crud.py
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.database.models import User, PendingTaskRow

# Users
async def get_user(user_id: int, session: AsyncSession) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalars().first()

async def get_or_create_user(user_id: int, session: AsyncSession) -> User:
    user = await get_user(user_id, session)
    if not user:
        user = User(id=user_id, points=0)
        session.add(user)
        try:
            await session.commit()
        except IntegrityError:
            # строку уже вставил параллельный запрос
            await session.rollback()
            return await get_user(user_id, session)
        await session.refresh(user)
    return user

async def increment_points(user_id: int, amount: int, session: AsyncSession) -> int | None:
    """Atomically add ``amount`` to the balance and return the new total.

    Returns None when there is no row for ``user_id`` or when the result
    would be negative; nothing is written in either case.
    """
    result = await session.execute(
        update(User)
        .where(User.id == user_id, User.points + amount >= 0)
        .values(points=User.points + amount)
        .returning(User.points)
        .execution_options(synchronize_session=False)
    )
    return result.scalar_one_or_none()

# Pending tasks
async def get_pending_task(user_id: int, session: AsyncSession) -> PendingTaskRow | None:
    result = await session.execute(select(PendingTaskRow).where(PendingTaskRow.user_id == user_id))
    return result.scalar_one_or_none()

async def set_pending_task(user_id: int, kind: str, target: int | None, session: AsyncSession):
    await session.merge(PendingTaskRow(user_id=user_id, kind=kind, target=target))
    await session.commit()

async def clear_pending_task(user_id: int, session: AsyncSession):
    await session.execute(delete(PendingTaskRow).where(PendingTaskRow.user_id == user_id))
    await session.commit()
