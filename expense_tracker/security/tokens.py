"""Signed session tokens."""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from expense_tracker.config import settings


class TokenExpired(Exception):
    pass


class TokenInvalid(Exception):
    pass


def create_access_token(user_id: int, email: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    )
    to_encode = {"sub": str(user_id), "email": email, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify the signature and expiry and return the payload."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired("Token expired.") from exc
    except jwt.PyJWTError as exc:
        raise TokenInvalid("Invalid token.") from exc

    if not payload.get("sub"):
        raise TokenInvalid("Invalid token.")
    return payload


def user_id_from_token(token: str) -> int:
    payload = decode_access_token(token)
    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise TokenInvalid("Invalid token.") from exc
