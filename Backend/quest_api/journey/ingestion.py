"""
Step ingestion: validate, upsert, re-aggregate, reconcile.

The upsert and the aggregate recompute share one transaction. Milestone and
achievement bookkeeping run afterwards as advisory steps: if they fail the
step is still recorded, and the next write (or the nightly sweep) catches up.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quest_api.core.exceptions import ConflictError, StorageError, ValidationError
from quest_api.db.crud import steps as steps_crud
from quest_api.db.models.steps import StepRecord
from quest_api.db.models.user import User
from quest_api.journey.achievements import unlock_achievements
from quest_api.journey.aggregator import recompute_totals
from quest_api.journey.constants import APPLE_HEALTH_SOURCE, MANUAL_SOURCE, MAX_DAILY_STEPS, STEPS_PER_MILE, STEP_SOURCES
from quest_api.journey.reconciler import reconcile_milestones
from quest_api.utils.dates import try_parse_date

logger = logging.getLogger(__name__)


@dataclass
class StepLogResult:
    step: StepRecord
    action: str  # "created" | "updated"

    @property
    def created(self) -> bool:
        return self.action == "created"


def validate_step_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Valid step count is required")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError("Step count must be a whole number")
    if value < 0:
        raise ValidationError("Step count cannot be negative")
    if value > MAX_DAILY_STEPS:
        raise ValidationError(f"Step count cannot exceed {MAX_DAILY_STEPS} per day")
    return int(value)


def validate_recorded_date(value: Any) -> date:
    if value is None or value == "":
        raise ValidationError("Recorded date is required (YYYY-MM-DD)")
    parsed = try_parse_date(value)
    if parsed is None:
        raise ValidationError("Date must be a valid calendar date in YYYY-MM-DD format")
    return parsed


def validate_source(value: Optional[str]) -> str:
    source = value or MANUAL_SOURCE
    if source not in STEP_SOURCES:
        raise ValidationError(f"Unknown step source '{source}'", allowed=sorted(STEP_SOURCES))
    return source


def log_steps(
    db: Session,
    *,
    user_id: UUID,
    step_count: Any,
    recorded_date: Any,
    source: Optional[str] = MANUAL_SOURCE,
) -> StepLogResult:
    """
    Direct entry path. Whatever is already stored for the date is
    overwritten: a directly submitted count always wins.
    """
    count = validate_step_count(step_count)
    day = validate_recorded_date(recorded_date)
    src = validate_source(source)
    return _record(db, user_id=user_id, step_count=count, recorded_date=day, source=src)


def record_synced_steps(
    db: Session,
    *,
    user: User,
    step_count: int,
    recorded_date: date,
    synced_at: datetime,
    source: str = APPLE_HEALTH_SOURCE,
) -> StepLogResult:
    """
    Synced channel path. Never clobbers a record from another source;
    re-delivery for the same channel updates in place.
    """
    try:
        existing = steps_crud.get_step_by_date(db, user_id=user.id, recorded_date=recorded_date)
    except SQLAlchemyError as exc:
        logger.exception("Failed to look up steps for user %s on %s", user.id, recorded_date)
        raise StorageError("Failed to save steps") from exc

    if existing is not None and existing.source != source:
        what = "Manual entry" if existing.source == MANUAL_SOURCE else f"A {existing.source} entry"
        raise ConflictError(
            f"{what} exists for this date",
            existing_source=existing.source,
            message=f"{source} sync will not overwrite {existing.source} entries",
        )

    return _record(
        db,
        user_id=user.id,
        step_count=step_count,
        recorded_date=recorded_date,
        source=source,
        synced_user=user,
        synced_at=synced_at,
    )


def _record(
    db: Session,
    *,
    user_id: UUID,
    step_count: int,
    recorded_date: date,
    source: str,
    synced_user: Optional[User] = None,
    synced_at: Optional[datetime] = None,
) -> StepLogResult:
    try:
        step, created = steps_crud.upsert_step(
            db,
            user_id=user_id,
            recorded_date=recorded_date,
            step_count=step_count,
            miles=step_count / STEPS_PER_MILE,
            source=source,
        )
        recompute_totals(db, user_id)
        if synced_user is not None:
            synced_user.apple_health_last_sync_at = synced_at
            db.add(synced_user)
        db.commit()
        db.refresh(step)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to save steps for user %s on %s", user_id, recorded_date)
        raise StorageError("Failed to save steps") from exc

    _run_bookkeeping(db, user_id)

    action = "created" if created else "updated"
    logger.info("Steps %s for user %s: %d steps on %s (%s)", action, user_id, step_count, recorded_date, source)
    return StepLogResult(step=step, action=action)


def _run_bookkeeping(db: Session, user_id: UUID) -> None:
    steps = (("Milestone reconciliation", reconcile_milestones), ("Achievement unlock", unlock_achievements))
    for label, task in steps:
        try:
            task(db, user_id)
        except Exception:
            db.rollback()
            logger.exception("%s failed for user %s", label, user_id)
