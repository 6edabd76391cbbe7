from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quest_api.apple_health import keys
from quest_api.dependencies import get_current_user, get_db
from quest_api.db.models.user import User
from quest_api.db.schemas.apple_health import GeneratedKey, SyncStatus

router = APIRouter(prefix="/api/users/apple-health", tags=["Apple Health"])


@router.get("/status", response_model=SyncStatus)
def get_status(user: User = Depends(get_current_user)):
    return keys.sync_status(user)


@router.post("/generate-key", response_model=GeneratedKey, status_code=status.HTTP_201_CREATED)
def generate_key(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """The key is only returned here; the user must copy it into their Shortcut."""
    api_key, created_at = keys.generate_key(db, user)
    return GeneratedKey(api_key=api_key, created_at=created_at)


@router.delete("/revoke-key")
def revoke_key(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    keys.revoke_key(db, user)
    return {"message": "API key revoked successfully"}


@router.post("/enable", response_model=SyncStatus)
def enable_sync(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return keys.enable_sync(db, user)


@router.post("/disable", response_model=SyncStatus)
def disable_sync(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return keys.disable_sync(db, user)
