# userhub/api/v1/cookies.py
"""HTTP cookie helpers for auth token transport."""
from fastapi import Response

from userhub.config import settings
from userhub.core.security import TokenPair
from userhub.api.v1.deps import ACCESS_COOKIE, REFRESH_COOKIE

COOKIE_PATH = "/"


def set_token_cookies(response: Response, pair: TokenPair) -> None:
    """Set both tokens as http-only cookies living as long as the tokens themselves."""
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=pair.access_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=settings.access_token_expire_minutes * 60,
        path=COOKIE_PATH,
    )
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=pair.refresh_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=settings.refresh_token_expire_minutes * 60,
        path=COOKIE_PATH,
    )


def clear_token_cookies(response: Response) -> None:
    for key in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            key=key,
            path=COOKIE_PATH,
            secure=settings.cookie_secure,
            httponly=True,
            samesite=settings.cookie_samesite,
        )
