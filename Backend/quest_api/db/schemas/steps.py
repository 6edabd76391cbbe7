from datetime import date, datetime
from typing import Any
from uuid import UUID
from pydantic import BaseModel, ConfigDict


class StepCreate(BaseModel):
    # types are checked by journey.ingestion so bad input maps to a 400
    step_count: Any = None
    recorded_date: Any = None
    source: str | None = None


class StepRead(BaseModel):
    id: UUID
    user_id: UUID
    step_count: int
    miles: float
    recorded_date: date
    source: str
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class StepLogResponse(BaseModel):
    step: StepRead
    action: str
    message: str


class StepSummary(BaseModel):
    total_steps: int
    total_miles: float
    record_count: int


class StepListResponse(BaseModel):
    steps: list[StepRead]
    summary: StepSummary


class TodayStepResponse(BaseModel):
    step: StepRead | None
    message: str | None = None
