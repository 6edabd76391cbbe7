import logging
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from quest_api.db.crud import milestones as milestones_crud
from quest_api.db.crud.user import get_user
from quest_api.db.models.milestone import Milestone

logger = logging.getLogger(__name__)


def reconcile_milestones(db: Session, user_id: UUID) -> Optional[Milestone]:
    """
    Bring the user's milestone state in line with their current mileage.

    The UserMilestone ledger only grows: every milestone at or below
    total_miles is recorded once and never removed. current_milestone is
    recomputed from scratch each time, so a downward correction moves it
    back. Returns the current milestone.

    A missing user, or mileage below the first milestone, is a no-op.
    """
    user = get_user(db, user_id)
    if user is None:
        return None

    reached = milestones_crud.milestones_reached_by_distance(db, user.total_miles)
    if not reached:
        return None

    added = milestones_crud.add_user_milestones_if_absent(db, user_id=user_id, milestones=reached)

    current = reached[0]
    user.current_milestone_id = current.id
    db.add(user)
    db.commit()

    for milestone in added:
        logger.info("User %s reached milestone %s (%s mi)", user_id, milestone.name, milestone.distance_from_start)
    return current
