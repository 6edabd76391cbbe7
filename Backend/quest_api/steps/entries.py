from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from quest_api.core.exceptions import ValidationError
from quest_api.db.crud import steps as steps_crud
from quest_api.db.models.user import User
from quest_api.db.schemas.steps import (
    StepCreate,
    StepListResponse,
    StepLogResponse,
    StepRead,
    StepSummary,
    TodayStepResponse,
)
from quest_api.dependencies import get_current_user, get_db
from quest_api.journey.ingestion import log_steps
from quest_api.journey.progress import round_half_up
from quest_api.utils.dates import try_parse_date, utc_today

router = APIRouter(tags=["Steps"])

MAX_LIST_LIMIT = 365


def _optional_date(value: str | None, name: str):
    if value is None or value == "":
        return None
    parsed = try_parse_date(value)
    if parsed is None:
        raise ValidationError(f"{name} must be in YYYY-MM-DD format")
    return parsed


@router.post("", response_model=StepLogResponse, status_code=status.HTTP_201_CREATED)
def create_steps(
    payload: StepCreate,
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = log_steps(
        db,
        user_id=user.id,
        step_count=payload.step_count,
        recorded_date=payload.recorded_date,
        source=payload.source,
    )
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return StepLogResponse(
        step=StepRead.model_validate(result.step),
        action=result.action,
        message="Steps logged successfully",
    )


@router.get("", response_model=StepListResponse)
def get_steps(
    start_date: str | None = Query(default=None, description="YYYY-MM-DD"),
    end_date: str | None = Query(default=None, description="YYYY-MM-DD"),
    limit: int = Query(default=30),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Step history, newest first, with totals for the returned window."""
    if not 1 <= limit <= MAX_LIST_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIST_LIMIT}")

    records = steps_crud.list_steps(
        db,
        user_id=user.id,
        start_date=_optional_date(start_date, "start_date"),
        end_date=_optional_date(end_date, "end_date"),
        limit=limit,
    )
    return StepListResponse(
        steps=[StepRead.model_validate(r) for r in records],
        summary=StepSummary(
            total_steps=sum(r.step_count for r in records),
            total_miles=round_half_up(sum(r.miles for r in records), 2),
            record_count=len(records),
        ),
    )


@router.get("/today", response_model=TodayStepResponse)
def get_today_steps(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    record = steps_crud.get_step_by_date(db, user_id=user.id, recorded_date=utc_today())
    if record is None:
        return TodayStepResponse(step=None, message="No steps logged today yet")
    return TodayStepResponse(step=StepRead.model_validate(record))
