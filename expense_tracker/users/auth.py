from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from loguru import logger
from sqlalchemy.orm import Session

from expense_tracker.config import settings
from expense_tracker.database import get_db
from expense_tracker.exceptions import AuthenticationError
from expense_tracker.security.tokens import TokenExpired, TokenInvalid, user_id_from_token
from expense_tracker.users import crud as user_crud
from expense_tracker.users.models import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_request_token(request: Request, bearer: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
    """The session token, from the auth cookie first and the bearer header second."""
    return request.cookies.get(settings.COOKIE_NAME) or bearer


def get_current_user(
    token: Optional[str] = Depends(get_request_token),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise AuthenticationError("Access denied. No token provided.")

    try:
        user_id = user_id_from_token(token)
    except TokenExpired:
        raise AuthenticationError("Token expired.")
    except TokenInvalid:
        logger.warning("Rejected request with an invalid token")
        raise AuthenticationError("Invalid token.")

    user = user_crud.get_user_by_id(db, user_id)
    if user is None:
        raise AuthenticationError("Invalid token. User not found.")
    return user
