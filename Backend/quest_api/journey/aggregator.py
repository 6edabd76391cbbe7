from uuid import UUID
from sqlalchemy.orm import Session

from quest_api.core.exceptions import NotFoundError
from quest_api.db.crud import steps as steps_crud
from quest_api.db.crud.user import get_user


def recompute_totals(db: Session, user_id: UUID) -> tuple[int, float]:
    """
    Rebuild the user's total_steps / total_miles from the full step log.

    Totals are never incremented: any number of retried or backfilled upserts
    converge on the same sum because the log holds one row per date.
    Flushes only; the caller commits.
    """
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    total_steps, total_miles = steps_crud.sum_steps(db, user_id=user_id)
    user.total_steps = total_steps
    user.total_miles = total_miles
    db.add(user)
    db.flush()
    return total_steps, total_miles
