from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quest_api.db.crud.milestones import list_milestones
from quest_api.db.models.user import User
from quest_api.db.schemas.journey import (
    AchievementListResponse,
    JourneyRead,
    MilestoneListResponse,
    MilestoneRead,
    ProgressResponse,
    ReachedMilestoneRead,
)
from quest_api.db.schemas.users import UserPublic
from quest_api.dependencies import get_current_user, get_db
from quest_api.journey.achievements import list_achievements
from quest_api.journey.constants import TOTAL_JOURNEY_MILES
from quest_api.journey.progress import project_progress

router = APIRouter(tags=["Journey"])


def _milestone(m) -> MilestoneRead | None:
    return MilestoneRead.model_validate(m) if m is not None else None


@router.get("/progress", response_model=ProgressResponse)
def get_progress(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    view = project_progress(db, user.id)

    public = UserPublic.model_validate(view.user).model_copy(update={"total_miles": view.total_miles})
    reached = [
        ReachedMilestoneRead(**MilestoneRead.model_validate(r.milestone).model_dump(), reached_at=r.reached_at)
        for r in view.milestones_reached
    ]
    return ProgressResponse(
        user=public,
        journey=JourneyRead(
            current_milestone=_milestone(view.current_milestone),
            next_milestone=_milestone(view.next_milestone),
            milestones_reached=reached,
            milestones_reached_count=len(reached),
            progress_to_next_milestone=view.progress_to_next_milestone,
            miles_to_next_milestone=view.miles_to_next_milestone,
            journey_progress_percent=view.journey_progress_percent,
            total_journey_miles=view.total_journey_miles,
            miles_remaining=view.miles_remaining,
        ),
    )


@router.get("/milestones", response_model=MilestoneListResponse)
def get_milestones(_: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return MilestoneListResponse(
        milestones=[MilestoneRead.model_validate(m) for m in list_milestones(db)],
        total_journey_miles=TOTAL_JOURNEY_MILES,
    )


@router.get("/achievements", response_model=AchievementListResponse)
def get_achievements(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return list_achievements(db, user.id)
