from typing import Iterator
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
import jwt

from quest_api.auth.session import read_access_token
from quest_api.core.exceptions import UnauthorizedError
from quest_api.core.rate_limit import RateLimiter
from quest_api.db.crud.user import get_user
from quest_api.db.engine import SessionLocal
from quest_api.db.models.user import User


def get_db() -> Iterator[Session]:
    """One Session per request, closed when the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_rate_limiter(request: Request) -> RateLimiter:
    # built once in main.py; tests replace it on app.state
    return request.app.state.webhook_rate_limiter


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if creds is None:
        raise UnauthorizedError("No token provided")

    try:
        claims = read_access_token(creds.credentials)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    user = get_user(db, claims.user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user
