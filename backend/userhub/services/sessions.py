"""
Session Controller

Login, logout, refresh-token rotation and password change, orchestrated over
the credential store and the token service. Routes handle cookies; these
functions decide outcomes and persist the refresh-token slot.
"""
import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from . import credential_store as store
from ..core.exceptions import (
    AuthError,
    ExpiredOrReusedTokenError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from ..core.security import TokenPair, TokenService
from ..models.user import User
from ..schemas.auth import ChangePasswordIn, LoginRequest
from ..schemas.user import UserOut

logger = logging.getLogger("uvicorn.error")


@dataclass
class SessionResult:
    """Sanitized user plus the freshly issued token pair."""
    user: UserOut
    tokens: TokenPair


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


async def login(credentials: LoginRequest, tokens: TokenService) -> SessionResult:
    """
    Authenticate by username or email + password and open a session.

    Raises:
    - ValidationError: neither username nor email given
    - NotFoundError: no matching user
    - AuthError (401): wrong password
    """
    username = _clean(credentials.username).lower()
    email = _clean(credentials.email).lower()
    if not username and not email:
        raise ValidationError("Username or email is required.")

    user = await store.find_by_username_or_email(username or None, email or None)
    if user is None:
        raise NotFoundError("User does not exist.")

    if not store.verify_password(user, credentials.password):
        raise AuthError("Invalid user credentials.", status_code=401)

    pair = tokens.issue_pair(user)
    await store.set_refresh_token(user.id, pair.refresh_token)
    logger.info("[session] login user=%s", user.id)
    return SessionResult(user=UserOut.from_user(user), tokens=pair)


async def logout(user: User) -> None:
    """Clear the stored refresh token; any outstanding refresh token becomes unusable."""
    await store.set_refresh_token(user.id, None)
    logger.info("[session] logout user=%s", user.id)


async def refresh(presented: Optional[str], tokens: TokenService) -> SessionResult:
    """
    Exchange a refresh token for a new pair (rotation).

    The presented token must verify and must still be the value recorded for its
    subject. The new refresh token replaces it atomically, so the old one can
    never be used again. All failures surface as the same 400 AuthError; the
    concrete reason is only logged.
    """
    presented = _clean(presented)
    try:
        if not presented:
            raise InvalidTokenError("Refresh token missing.")
        claims = tokens.verify_refresh(presented)
        user = await store.get_by_id(claims["sub"])
        if user is None:
            raise InvalidTokenError("Refresh token subject does not exist.")
        if not user.refresh_token or not hmac.compare_digest(user.refresh_token, presented):
            raise ExpiredOrReusedTokenError()

        pair = tokens.issue_pair(user)
        if not await store.rotate_refresh_token(user.id, presented, pair.refresh_token):
            # Another request rotated or cleared the slot in between.
            raise ExpiredOrReusedTokenError()
    except (InvalidTokenError, ExpiredOrReusedTokenError) as exc:
        logger.warning("[session] refresh rejected: %s", exc.message)
        raise AuthError("Invalid or expired refresh token.", status_code=400) from exc

    logger.info("[session] refresh user=%s", user.id)
    return SessionResult(user=UserOut.from_user(user), tokens=pair)


async def change_password(user: User, body: ChangePasswordIn) -> None:
    """
    Replace the password hash after checking the old password.

    The stored refresh token is left untouched, so existing sessions survive a
    password change.
    """
    if not body.oldPassword or not _clean(body.newPassword):
        raise ValidationError("Old and new password are required.")

    # Reload so the check runs against the current hash, not the guard's snapshot.
    current = await store.get_by_id(user.id)
    if current is None:
        raise NotFoundError("User does not exist.")
    if not store.verify_password(current, body.oldPassword):
        raise AuthError("Invalid old password.", status_code=400)

    await store.set_password(current.id, body.newPassword)
    logger.info("[session] password changed user=%s", current.id)


def get_current_user(user: User) -> UserOut:
    """Identity already resolved by the auth guard; no storage access."""
    return UserOut.from_user(user)
