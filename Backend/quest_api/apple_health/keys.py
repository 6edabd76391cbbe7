import logging
from datetime import datetime
from typing import Any
from sqlalchemy.orm import Session

from quest_api.core.exceptions import ValidationError
from quest_api.db.crud import user as user_crud
from quest_api.db.models.user import User
from quest_api.utils.crypto import generate_api_key, hash_api_key
from quest_api.utils.dates import utc_now

logger = logging.getLogger(__name__)


def sync_status(user: User) -> dict[str, Any]:
    return {
        "enabled": bool(user.apple_health_sync_enabled),
        "has_api_key": user.apple_health_api_key_hash is not None,
        "last_sync_at": user.apple_health_last_sync_at,
        "api_key_created_at": user.apple_health_api_key_created_at,
    }


def generate_key(db: Session, user: User) -> tuple[str, datetime]:
    """
    Issue a fresh webhook key and enable sync. Any previous key stops working.
    The plaintext key is returned exactly once and never stored.
    """
    api_key = generate_api_key()
    created_at = utc_now()
    user_crud.set_apple_health_key(db, user, key_hash=hash_api_key(api_key), created_at=created_at)
    logger.info("Apple Health API key generated for user %s", user.id)
    return api_key, created_at


def revoke_key(db: Session, user: User) -> None:
    user_crud.clear_apple_health_key(db, user)
    logger.info("Apple Health API key revoked for user %s", user.id)


def enable_sync(db: Session, user: User) -> dict[str, Any]:
    if user.apple_health_api_key_hash is None:
        raise ValidationError("No API key exists. Generate one first.")
    user_crud.set_apple_health_sync(db, user, enabled=True)
    return sync_status(user)


def disable_sync(db: Session, user: User) -> dict[str, Any]:
    user_crud.set_apple_health_sync(db, user, enabled=False)
    return sync_status(user)
