from datetime import date
from typing import Optional
from uuid import UUID
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from quest_api.db.models.steps import StepRecord


def get_step_by_date(
    db: Session,
    *,
    user_id: UUID,
    recorded_date: date
) -> Optional[StepRecord]:
    """Get the step record for one calendar date."""
    stmt = select(StepRecord).where(
        StepRecord.user_id == user_id,
        StepRecord.recorded_date == recorded_date
    )
    return db.execute(stmt).scalar_one_or_none()


def list_steps(
    db: Session,
    *,
    user_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = 30
) -> list[StepRecord]:
    """Newest first, optionally bounded by an inclusive date range."""
    stmt = select(StepRecord).where(StepRecord.user_id == user_id)
    if start_date is not None:
        stmt = stmt.where(StepRecord.recorded_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(StepRecord.recorded_date <= end_date)
    stmt = stmt.order_by(StepRecord.recorded_date.desc()).limit(limit)

    return list(db.execute(stmt).scalars().all())


def list_active_dates(db: Session, *, user_id: UUID) -> list[date]:
    """Ascending dates that have a non-zero step count."""
    stmt = (
        select(StepRecord.recorded_date)
        .where(StepRecord.user_id == user_id, StepRecord.step_count > 0)
        .order_by(StepRecord.recorded_date)
    )
    return list(db.execute(stmt).scalars().all())


def sum_steps(db: Session, *, user_id: UUID) -> tuple[int, float]:
    """(sum of step_count, sum of miles) over every record of the user."""
    stmt = select(
        func.coalesce(func.sum(StepRecord.step_count), 0),
        func.coalesce(func.sum(StepRecord.miles), 0.0),
    ).where(StepRecord.user_id == user_id)
    total_steps, total_miles = db.execute(stmt).one()
    return int(total_steps), float(total_miles)


def upsert_step(
    db: Session,
    *,
    user_id: UUID,
    recorded_date: date,
    step_count: int,
    miles: float,
    source: str
) -> tuple[StepRecord, bool]:
    """
    Insert or update in place the record keyed on (user_id, recorded_date).
    Returns (record, created). Flushes only; the caller owns the commit.
    """
    db_obj = get_step_by_date(db, user_id=user_id, recorded_date=recorded_date)

    if db_obj:
        db_obj.step_count = step_count
        db_obj.miles = miles
        db_obj.source = source
        db.add(db_obj)
        db.flush()
        return db_obj, False

    db_obj = StepRecord(
        user_id=user_id,
        recorded_date=recorded_date,
        step_count=step_count,
        miles=miles,
        source=source
    )
    db.add(db_obj)
    db.flush()
    return db_obj, True
