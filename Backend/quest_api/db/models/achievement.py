from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import String, Text, DateTime, Integer, UniqueConstraint, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from quest_api.db.base import Base, utcnow


class Achievement(Base):
    __tablename__ = "achievements"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    icon_url: Mapped[str | None] = mapped_column(String, nullable=True)
    requirement_type: Mapped[str] = mapped_column(String(16), nullable=False)  # milestone|steps|streak|special
    requirement_value: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class UserAchievement(Base):
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievements_user_achievement"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"),
                                               index=True, nullable=False)
    achievement_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("achievements.id", ondelete="CASCADE"),
                                                      nullable=False)
    unlocked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
