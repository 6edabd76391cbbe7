"""Bearer tokens for the web client: HS256 JWTs signed with APP_SECRET_KEY."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID
import jwt

from quest_api.config import APP_SECRET_KEY, JWT_EXPIRES_IN_DAYS

TOKEN_ALGORITHM = "HS256"
TOKEN_AUDIENCE = "quest-to-mordor-web"
TOKEN_ISSUER = "quest-to-mordor-api"


@dataclass(frozen=True)
class TokenClaims:
    user_id: UUID
    email: str
    expires_at: datetime


def issue_access_token(
    user_id: UUID,
    email: str,
    *,
    secret_key: str = APP_SECRET_KEY,
    lifetime: timedelta = timedelta(days=JWT_EXPIRES_IN_DAYS),
    now: Optional[datetime] = None,
) -> str:
    issued = now or datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "email": email,
        "iss": TOKEN_ISSUER,
        "aud": TOKEN_AUDIENCE,
        "iat": issued,
        "exp": issued + lifetime,
    }
    return jwt.encode(claims, secret_key, algorithm=TOKEN_ALGORITHM)


def read_access_token(token: str, *, secret_key: str = APP_SECRET_KEY) -> TokenClaims:
    """
    Verify signature, expiry, audience and issuer.

    Raises jwt.ExpiredSignatureError for stale tokens and jwt.InvalidTokenError
    for everything else, including a sub that is not a user id.
    """
    decoded = jwt.decode(
        token,
        secret_key,
        algorithms=[TOKEN_ALGORITHM],
        audience=TOKEN_AUDIENCE,
        issuer=TOKEN_ISSUER,
        options={"require": ["sub", "exp"]},
    )
    try:
        user_id = UUID(decoded["sub"])
    except (TypeError, ValueError) as exc:
        raise jwt.InvalidTokenError("sub is not a user id") from exc

    return TokenClaims(
        user_id=user_id,
        email=decoded.get("email", ""),
        expires_at=datetime.fromtimestamp(decoded["exp"], tz=timezone.utc),
    )
