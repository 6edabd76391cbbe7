from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import String, Text, DateTime, Integer, Float, UniqueConstraint, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from quest_api.db.base import Base, utcnow


class Milestone(Base):
    """Fixed waypoint on the road from Bag End to Mount Doom."""
    __tablename__ = "milestones"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    distance_from_start: Mapped[float] = mapped_column(Float, index=True, nullable=False)  # miles
    order_index: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    quote: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class UserMilestone(Base):
    """
    Write-once ledger: user X reached milestone Y at time T.
    Rows are never updated or deleted, even if mileage is later corrected down.
    """
    __tablename__ = "user_milestones"
    __table_args__ = (
        UniqueConstraint("user_id", "milestone_id", name="uq_user_milestones_user_milestone"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"),
                                               index=True, nullable=False)
    milestone_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("milestones.id", ondelete="CASCADE"),
                                                    nullable=False)
    reached_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    milestone: Mapped[Milestone] = relationship("Milestone", lazy="joined")
