from uuid import UUID
from sqlalchemy import select
from sqlalchemy.orm import Session

from quest_api.db.models.achievement import Achievement, UserAchievement


def list_achievements(db: Session) -> list[Achievement]:
    stmt = select(Achievement).order_by(Achievement.requirement_type, Achievement.requirement_value)
    return list(db.execute(stmt).scalars().all())


def unlocked_by_achievement_id(db: Session, *, user_id: UUID) -> dict[UUID, UserAchievement]:
    stmt = select(UserAchievement).where(UserAchievement.user_id == user_id)
    return {ua.achievement_id: ua for ua in db.execute(stmt).scalars().all()}


def add_user_achievements_if_absent(
    db: Session,
    *,
    user_id: UUID,
    achievements: list[Achievement]
) -> list[Achievement]:
    """Write-once unlock rows. Flushes only."""
    already = unlocked_by_achievement_id(db, user_id=user_id)
    added = []
    for achievement in achievements:
        if achievement.id in already:
            continue
        db.add(UserAchievement(user_id=user_id, achievement_id=achievement.id))
        added.append(achievement)
    db.flush()
    return added
