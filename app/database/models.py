# models.py
from datetime import datetime, timezone

from sqlalchemy import Column, BigInteger, Integer, String, DateTime, CheckConstraint
from app.database.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("points >= 0", name="ck_users_points_non_negative"),)

    id = Column(BigInteger, primary_key=True)  # telegram chat id
    points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class PendingTaskRow(Base):
    __tablename__ = "pending_tasks"

    user_id = Column(BigInteger, primary_key=True)
    kind = Column(String(16), nullable=False)   # 'video', 'ad', 'guess'
    target = Column(Integer, nullable=True)     # только для guess
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
