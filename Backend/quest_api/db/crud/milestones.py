from typing import Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.orm import Session

from quest_api.db.models.milestone import Milestone, UserMilestone


def list_milestones(db: Session) -> list[Milestone]:
    stmt = select(Milestone).order_by(Milestone.order_index)
    return list(db.execute(stmt).scalars().all())


def milestones_reached_by_distance(db: Session, total_miles: float) -> list[Milestone]:
    """Every milestone at or below total_miles, furthest first."""
    stmt = (
        select(Milestone)
        .where(Milestone.distance_from_start <= total_miles)
        .order_by(Milestone.order_index.desc())
    )
    return list(db.execute(stmt).scalars().all())


def next_milestone(db: Session, total_miles: float) -> Optional[Milestone]:
    stmt = (
        select(Milestone)
        .where(Milestone.distance_from_start > total_miles)
        .order_by(Milestone.distance_from_start)
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def list_user_milestones(db: Session, *, user_id: UUID) -> list[UserMilestone]:
    """Ledger rows for the user, in journey order."""
    stmt = (
        select(UserMilestone)
        .join(Milestone, UserMilestone.milestone_id == Milestone.id)
        .where(UserMilestone.user_id == user_id)
        .order_by(Milestone.order_index)
    )
    return list(db.execute(stmt).scalars().unique().all())


def reached_milestone_ids(db: Session, *, user_id: UUID) -> set[UUID]:
    stmt = select(UserMilestone.milestone_id).where(UserMilestone.user_id == user_id)
    return set(db.execute(stmt).scalars().all())


def add_user_milestones_if_absent(
    db: Session,
    *,
    user_id: UUID,
    milestones: list[Milestone]
) -> list[Milestone]:
    """
    Insert a ledger row for each milestone the user has not reached yet.
    Existing rows are left untouched. Returns the milestones actually inserted.
    Flushes only.
    """
    already = reached_milestone_ids(db, user_id=user_id)
    added = []
    for milestone in milestones:
        if milestone.id in already:
            continue
        db.add(UserMilestone(user_id=user_id, milestone_id=milestone.id))
        added.append(milestone)
    db.flush()
    return added
