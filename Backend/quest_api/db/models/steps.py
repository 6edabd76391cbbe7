from __future__ import annotations
import uuid
from datetime import date, datetime
from sqlalchemy import String, Date, DateTime, Integer, Float, UniqueConstraint, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from quest_api.db.base import Base, utcnow

Source = String(16)


class StepRecord(Base):
    """
    One row per user + calendar date.
    Rows are only ever written through the (user_id, recorded_date) upsert.
    """
    __tablename__ = "steps"
    __table_args__ = (
        UniqueConstraint("user_id", "recorded_date", name="uq_steps_user_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid,
                                               ForeignKey("users.id", ondelete="CASCADE"),
                                               index=True, nullable=False)
    recorded_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)

    step_count: Mapped[int] = mapped_column(Integer, nullable=False)
    miles: Mapped[float] = mapped_column(Float, nullable=False)
    source: Mapped[str] = mapped_column(Source, nullable=False, default="manual")  # manual|apple_health|...

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow,
                                                 onupdate=utcnow, nullable=False)
