from quest_api.core.celery_app import celery_app
from quest_api.core.logging import setup_logging
import logging

setup_logging()
logger = logging.getLogger(__name__)

if __name__ == '__main__':
    logger.info("Starting Celery worker with beat scheduler...")
    celery_app.start(argv=['worker', '--beat', '--loglevel=info', '--concurrency=2'])
