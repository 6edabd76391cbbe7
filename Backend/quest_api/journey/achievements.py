import logging
from datetime import date, timedelta
from typing import Any
from uuid import UUID
from sqlalchemy.orm import Session

from quest_api.db.crud import achievements as achievements_crud
from quest_api.db.crud import milestones as milestones_crud
from quest_api.db.crud import steps as steps_crud
from quest_api.db.crud.user import get_user
from quest_api.db.models.achievement import Achievement
from quest_api.db.models.user import User

logger = logging.getLogger(__name__)


def longest_streak(dates: list[date]) -> int:
    """Longest run of consecutive calendar days in an ascending date list."""
    best = 0
    run = 0
    previous = None
    for current in dates:
        if previous is not None and current - previous == timedelta(days=1):
            run += 1
        elif current != previous:
            run = 1
        best = max(best, run)
        previous = current
    return best


def _qualifies(achievement: Achievement, *, user: User, streak: int, furthest_order: int) -> bool:
    value = achievement.requirement_value
    if value is None:
        return False
    if achievement.requirement_type == "steps":
        return user.total_steps >= value
    if achievement.requirement_type == "streak":
        return streak >= value
    if achievement.requirement_type == "milestone":
        return furthest_order >= value
    # "special" achievements are granted by hand
    return False


def unlock_achievements(db: Session, user_id: UUID) -> list[Achievement]:
    """
    Unlock every achievement the user now qualifies for.
    Unlocks are write-once; nothing is ever revoked. Missing user is a no-op.
    """
    user = get_user(db, user_id)
    if user is None:
        return []

    streak = longest_streak(steps_crud.list_active_dates(db, user_id=user_id))
    ledger = milestones_crud.list_user_milestones(db, user_id=user_id)
    furthest_order = max((um.milestone.order_index for um in ledger), default=0)

    earned = [
        a for a in achievements_crud.list_achievements(db)
        if _qualifies(a, user=user, streak=streak, furthest_order=furthest_order)
    ]
    added = achievements_crud.add_user_achievements_if_absent(db, user_id=user_id, achievements=earned)
    db.commit()

    for achievement in added:
        logger.info("User %s unlocked achievement %s", user_id, achievement.name)
    return added


def list_achievements(db: Session, user_id: UUID) -> dict[str, Any]:
    """Every achievement with the user's unlock status."""
    unlocked = achievements_crud.unlocked_by_achievement_id(db, user_id=user_id)
    items = []
    for achievement in achievements_crud.list_achievements(db):
        ua = unlocked.get(achievement.id)
        items.append({
            "id": achievement.id,
            "name": achievement.name,
            "description": achievement.description,
            "icon_url": achievement.icon_url,
            "requirement_type": achievement.requirement_type,
            "requirement_value": achievement.requirement_value,
            "unlocked": ua is not None,
            "unlocked_at": ua.unlocked_at if ua else None,
        })

    unlocked_count = sum(1 for item in items if item["unlocked"])
    total = len(items)
    return {
        "achievements": items,
        "unlocked_count": unlocked_count,
        "total_count": total,
        "progress_percent": round(unlocked_count / total * 100) if total else 0,
    }
