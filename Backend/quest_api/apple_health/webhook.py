import logging
from datetime import datetime
from typing import Any, Optional
from fastapi import APIRouter, Depends, Header, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quest_api.apple_health.payloads import decode_webhook_body, parse_webhook_payload
from quest_api.core.exceptions import ForbiddenError, StorageError, UnauthorizedError
from quest_api.core.rate_limit import RateLimiter
from quest_api.db.crud.user import get_user_by_api_key_hash
from quest_api.db.schemas.apple_health import WebhookResponse
from quest_api.db.schemas.steps import StepRead
from quest_api.dependencies import get_db, get_rate_limiter
from quest_api.journey.ingestion import StepLogResult, record_synced_steps
from quest_api.utils.crypto import hash_api_key
from quest_api.utils.dates import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])


def ingest_webhook(
    db: Session,
    *,
    api_key: Optional[str],
    payload: Any,
    rate_limiter: RateLimiter,
    now: Optional[datetime] = None,
) -> StepLogResult:
    """
    Apple Health webhook: rate limit, authenticate, normalize, persist.
    Checks run in that order.
    """
    if not api_key:
        raise UnauthorizedError("API key required")

    rate_limiter.hit(api_key)

    try:
        user = get_user_by_api_key_hash(db, hash_api_key(api_key))
    except SQLAlchemyError as exc:
        logger.exception("API key lookup failed")
        raise StorageError("Webhook processing failed") from exc

    if user is None:
        logger.warning("Invalid API key attempted: %s...", api_key[:8])
        raise UnauthorizedError("Invalid API key")

    if not user.apple_health_sync_enabled:
        raise ForbiddenError("Apple Health sync is disabled for this account")

    now = now or utc_now()
    steps = parse_webhook_payload(payload, now=now)

    result = record_synced_steps(
        db,
        user=user,
        step_count=steps.step_count,
        recorded_date=steps.recorded_date,
        synced_at=now,
    )
    logger.info(
        "Apple Health sync %s for user %s: %d steps on %s (shape=%s)",
        result.action, user.id, steps.step_count, steps.recorded_date, steps.shape,
    )
    return result


async def read_webhook_body(request: Request) -> Any:
    return decode_webhook_body(await request.body(), request.headers.get("content-type"))


@router.post("/apple-health", response_model=WebhookResponse)
def apple_health_webhook(
    response: Response,
    payload: Any = Depends(read_webhook_body),
    x_apple_health_api_key: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
):
    result = ingest_webhook(db, api_key=x_apple_health_api_key, payload=payload, rate_limiter=rate_limiter)
    response.status_code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    return WebhookResponse(step=StepRead.model_validate(result.step), action=result.action)
