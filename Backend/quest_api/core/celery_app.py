from celery import Celery
from celery.schedules import crontab
from quest_api.config import REDIS_URL, RECONCILE_SWEEP_HOUR_UTC

broker_url = REDIS_URL or "redis://localhost:6379/0"

# rediss:// needs explicit cert requirements or kombu refuses to connect
if broker_url.startswith("rediss://"):
    broker_url = f"{broker_url}?ssl_cert_reqs=CERT_NONE"

celery_app = Celery(
    "quest_to_mordor",
    broker=broker_url,
    backend=broker_url,
    broker_connection_retry_on_startup=True,
    include=["quest_api.core.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "nightly-journey-reconcile": {
            "task": "quest_api.reconcile_all_users",
            "schedule": crontab(hour=RECONCILE_SWEEP_HOUR_UTC, minute=0),
        },
    },
)
