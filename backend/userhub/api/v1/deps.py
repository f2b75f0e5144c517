# userhub/api/v1/deps.py
from fastapi import Depends, Header, Request

from userhub.core.exceptions import AuthError, InvalidTokenError
from userhub.core.security import TokenService, token_service
from userhub.models.user import User
from userhub.services import credential_store as store
from userhub.services.media import MediaAttachmentManager
from userhub.services.media_base import MediaHost

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def get_token_service() -> TokenService:
    """Process-wide token service built from settings."""
    return token_service


def get_media_host(request: Request) -> MediaHost:
    """Media host created at startup (see main.on_startup)."""
    return request.app.state.media_host


def get_media_manager(host: MediaHost = Depends(get_media_host)) -> MediaAttachmentManager:
    return MediaAttachmentManager(host)


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """
    FastAPI dependency to get the current authenticated user (auth guard).

    This dependency extracts and validates the access token from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (accessToken) - fallback method

    The user is loaded from storage before the protected handler runs and
    attached to `request.state.user`.

    Returns:
        User: The authenticated user record

    Raises:
        AuthError (401): If no token is provided
        AuthError (401): If token is invalid or expired
        AuthError (401): If the user no longer exists

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": str(user.id)}
    """
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie: accessToken
    if not token:
        token = request.cookies.get(ACCESS_COOKIE)

    if not token:
        raise AuthError("Unauthorized request.")

    try:
        payload = tokens.verify_access(token)
    except InvalidTokenError as exc:
        raise AuthError("Invalid access token.") from exc

    user = await store.get_by_id(payload["sub"])
    if not user:
        raise AuthError("Invalid access token.")
    request.state.user = user
    return user
