import logging
import re
from sqlalchemy.orm import Session

from quest_api.auth.passwords import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH, hash_password, verify_password
from quest_api.auth.session import issue_access_token
from quest_api.core.exceptions import ConflictError, UnauthorizedError, ValidationError
from quest_api.db.crud import user as user_crud
from quest_api.db.models.user import User

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def issue_token(user: User) -> str:
    return issue_access_token(user.id, user.email)


def register(db: Session, *, email: str, password: str, display_name: str) -> tuple[User, str]:
    email = (email or "").strip().lower()
    display_name = (display_name or "").strip()
    if not email or not password or not display_name:
        raise ValidationError("Email, password, and display name are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")

    if user_crud.get_user_by_email(db, email):
        raise ConflictError("Email already registered")

    user = user_crud.create_user(db, email=email, password_hash=hash_password(password), display_name=display_name)
    logger.info("New user registered: %s", user.email)
    return user, issue_token(user)


def login(db: Session, *, email: str, password: str) -> tuple[User, str]:
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = user_crud.get_user_by_email(db, email.strip())
    if user is None or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")

    logger.info("User logged in: %s", user.email)
    return user, issue_token(user)
