from fastapi import Response

from expense_tracker.config import settings


def _cookie_policy() -> dict:
    # cross-site frontends need SameSite=None, which browsers only accept with Secure
    if settings.is_production:
        return {"secure": True, "samesite": "none"}
    return {"secure": False, "samesite": "lax"}


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=settings.COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        **_cookie_policy(),
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.COOKIE_NAME,
        path="/",
        httponly=True,
        **_cookie_policy(),
    )
