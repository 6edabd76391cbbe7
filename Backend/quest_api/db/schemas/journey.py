from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from quest_api.db.schemas.users import UserPublic


class MilestoneRead(BaseModel):
    id: UUID
    name: str
    description: str | None
    distance_from_start: float
    order_index: int
    image_url: str | None
    quote: str | None
    model_config = ConfigDict(from_attributes=True)


class ReachedMilestoneRead(MilestoneRead):
    reached_at: datetime


class MilestoneListResponse(BaseModel):
    milestones: list[MilestoneRead]
    total_journey_miles: int


class JourneyRead(BaseModel):
    current_milestone: MilestoneRead | None
    next_milestone: MilestoneRead | None
    milestones_reached: list[ReachedMilestoneRead]
    milestones_reached_count: int
    progress_to_next_milestone: int
    miles_to_next_milestone: float
    journey_progress_percent: float
    total_journey_miles: int
    miles_remaining: float


class ProgressResponse(BaseModel):
    user: UserPublic
    journey: JourneyRead


class AchievementRead(BaseModel):
    id: UUID
    name: str
    description: str
    icon_url: str | None
    requirement_type: str
    requirement_value: int | None
    unlocked: bool
    unlocked_at: datetime | None


class AchievementListResponse(BaseModel):
    achievements: list[AchievementRead]
    unlocked_count: int
    total_count: int
    progress_percent: int
