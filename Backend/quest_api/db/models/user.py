from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from quest_api.db.base import Base, utcnow
from quest_api.db.models.milestone import Milestone


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String, nullable=True)

    # Derived from the step log, see journey.aggregator
    total_steps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_miles: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    current_milestone_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("milestones.id", ondelete="SET NULL"), nullable=True
    )
    current_milestone: Mapped[Optional[Milestone]] = relationship(Milestone, lazy="joined")

    # Apple Health webhook; only the SHA-256 of the key is kept
    apple_health_api_key_hash: Mapped[str | None] = mapped_column(String(64), unique=True, index=True, nullable=True)
    apple_health_api_key_created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    apple_health_last_sync_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    apple_health_sync_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
