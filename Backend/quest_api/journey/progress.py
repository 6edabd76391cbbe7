from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from quest_api.core.exceptions import NotFoundError
from quest_api.db.crud import milestones as milestones_crud
from quest_api.db.crud.user import get_user
from quest_api.db.models.milestone import Milestone
from quest_api.db.models.user import User
from quest_api.journey.constants import TOTAL_JOURNEY_MILES


@dataclass
class ReachedMilestone:
    milestone: Milestone
    reached_at: datetime


@dataclass
class ProgressView:
    user: User
    total_steps: int
    total_miles: float
    current_milestone: Optional[Milestone]
    next_milestone: Optional[Milestone]
    milestones_reached: list[ReachedMilestone] = field(default_factory=list)
    progress_to_next_milestone: int = 0
    miles_to_next_milestone: float = 0.0
    journey_progress_percent: float = 0.0
    miles_remaining: float = 0.0
    total_journey_miles: int = TOTAL_JOURNEY_MILES


def round_half_up(value: float, places: int = 0) -> float:
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, value))


def progress_to_next(total_miles: float, current: Optional[Milestone], nxt: Optional[Milestone]) -> int:
    """Whole-number percent of the current leg covered, clamped to [0, 100]."""
    if nxt is None:
        return 100 if current is not None else 0

    start = current.distance_from_start if current is not None else 0.0
    span = nxt.distance_from_start - start
    if span <= 0:
        return 100
    return int(clamp_percent(round_half_up((total_miles - start) / span * 100)))


def journey_percent(total_miles: float) -> float:
    return clamp_percent(round_half_up(total_miles / TOTAL_JOURNEY_MILES * 100, 2))


def project_progress(db: Session, user_id: UUID) -> ProgressView:
    """Read-only view of where the user stands on the road to Mordor."""
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    total_miles = float(user.total_miles or 0.0)
    current = user.current_milestone
    nxt = milestones_crud.next_milestone(db, total_miles)
    ledger = milestones_crud.list_user_milestones(db, user_id=user_id)

    return ProgressView(
        user=user,
        total_steps=user.total_steps,
        total_miles=round_half_up(total_miles, 2),
        current_milestone=current,
        next_milestone=nxt,
        milestones_reached=[ReachedMilestone(um.milestone, um.reached_at) for um in ledger],
        progress_to_next_milestone=progress_to_next(total_miles, current, nxt),
        miles_to_next_milestone=round_half_up(max(0.0, nxt.distance_from_start - total_miles), 2) if nxt else 0.0,
        journey_progress_percent=journey_percent(total_miles),
        miles_remaining=round_half_up(max(0.0, TOTAL_JOURNEY_MILES - total_miles), 2),
    )
