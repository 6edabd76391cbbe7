"""
Background maintenance for journey state.

The nightly sweep recomputes every user's totals from their step rows and
re-runs milestone and achievement bookkeeping. It repairs users whose
post-commit bookkeeping failed at ingestion time.
"""
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quest_api.core.celery_app import celery_app
from quest_api.core.exceptions import NotFoundError
from quest_api.db.crud import user as user_crud
from quest_api.db.engine import SessionLocal
from quest_api.journey.achievements import unlock_achievements
from quest_api.journey.aggregator import recompute_totals
from quest_api.journey.reconciler import reconcile_milestones

logger = logging.getLogger(__name__)


def reconcile_all_users(db: Session) -> dict:
    """
    Returns counts of users processed and failed, and of achievements newly
    unlocked. Users deleted while the sweep runs are skipped and not counted.
    """
    stats = {"users": 0, "failed": 0, "achievements": 0}

    for user_id in user_crud.list_user_ids(db):
        try:
            recompute_totals(db, user_id)
            db.commit()
            reconcile_milestones(db, user_id)
            unlocked = unlock_achievements(db, user_id)
        except NotFoundError:
            # deleted after the id list was read
            db.rollback()
            logger.info("Reconcile sweep skipped missing user %s", user_id)
            continue
        except SQLAlchemyError:
            db.rollback()
            stats["users"] += 1
            stats["failed"] += 1
            logger.exception("Reconcile sweep failed for user %s", user_id)
            continue

        stats["users"] += 1
        stats["achievements"] += len(unlocked)

    logger.info(
        "Reconcile sweep done: %d users, %d failed, %d achievements unlocked",
        stats["users"], stats["failed"], stats["achievements"],
    )
    return stats


@celery_app.task(name="quest_api.reconcile_all_users")
def reconcile_all_users_task() -> dict:
    db = SessionLocal()
    try:
        return reconcile_all_users(db)
    finally:
        db.close()
