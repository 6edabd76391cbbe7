"""Create tables and load reference data: python -m quest_api.db.init_db"""
import logging

import quest_api.db.models  # noqa: F401  registers every table on Base.metadata
from quest_api.core.logging import setup_logging
from quest_api.db.base import Base
from quest_api.db.engine import engine, SessionLocal
from quest_api.db.seed import seed_reference_data

logger = logging.getLogger(__name__)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    logger.info("Starting database initialization...")
    init_db()
    logger.info("Database ready")
