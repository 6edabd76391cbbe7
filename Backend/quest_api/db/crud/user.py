from datetime import datetime
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session
from quest_api.db.models.user import User


def get_user(db: Session, user_id: UUID) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def get_user_by_api_key_hash(db: Session, key_hash: str) -> Optional[User]:
    return db.query(User).filter(User.apple_health_api_key_hash == key_hash).first()


def list_user_ids(db: Session) -> list[UUID]:
    return [row[0] for row in db.query(User.id).order_by(User.created_at).all()]


def create_user(db: Session, *, email: str, password_hash: str, display_name: str) -> User:
    user = User(email=email.lower(), password_hash=password_hash, display_name=display_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_apple_health_key(db: Session, user: User, *, key_hash: str, created_at: datetime) -> User:
    """Store a new webhook key digest and switch sync on."""
    user.apple_health_api_key_hash = key_hash
    user.apple_health_api_key_created_at = created_at
    user.apple_health_sync_enabled = True
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def clear_apple_health_key(db: Session, user: User) -> User:
    user.apple_health_api_key_hash = None
    user.apple_health_api_key_created_at = None
    user.apple_health_sync_enabled = False
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_apple_health_sync(db: Session, user: User, *, enabled: bool) -> User:
    user.apple_health_sync_enabled = enabled
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
