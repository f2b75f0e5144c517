"""
Credential Store

Persistence of the User record: lookups, creation with password hashing,
refresh-token slot writes and partial profile updates. Every read that is
meant for a response returns the sanitized UserOut projection.
"""
from typing import Optional

from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q

from ..core.exceptions import ConflictError
from ..core.security import hash_password, verify_password as _verify_hash
from ..models.user import User
from ..schemas.user import UserOut


async def find_by_username_or_email(
    username: Optional[str] = None, email: Optional[str] = None
) -> Optional[User]:
    """Match on either field; returns None when neither is given or nothing matches."""
    conditions = []
    if username:
        conditions.append(Q(username=username))
    if email:
        conditions.append(Q(email=email))
    if not conditions:
        return None
    return await User.filter(Q(*conditions, join_type="OR")).first()


async def find_by_username(username: str) -> Optional[User]:
    return await User.get_or_none(username=username)


async def get_by_id(user_id) -> Optional[User]:
    return await User.get_or_none(id=user_id)


async def get_sanitized(user_id) -> Optional[UserOut]:
    user = await get_by_id(user_id)
    return UserOut.from_user(user) if user else None


async def create(
    *,
    username: str,
    email: str,
    fullname: str,
    password: str,
    avatar_url: str,
    cover_image_url: str = "",
) -> User:
    """
    Persist a new user with a freshly computed password hash.

    Raises:
    - ConflictError if the unique indexes reject username or email (e.g. a
      concurrent registration won the race after the pre-check)
    """
    try:
        return await User.create(
            username=username,
            email=email,
            fullname=fullname,
            password_hash=hash_password(password),
            avatar_url=avatar_url,
            cover_image_url=cover_image_url or "",
        )
    except IntegrityError as exc:
        raise ConflictError("The username or email already exists.") from exc


def verify_password(user: User, candidate: Optional[str]) -> bool:
    """Compare a candidate password with the stored hash. Never raises on mismatch."""
    if candidate is None:
        return False
    return _verify_hash(candidate, user.password_hash)


async def set_password(user_id, new_password: str) -> None:
    await User.filter(id=user_id).update(password_hash=hash_password(new_password))


async def set_refresh_token(user_id, token: Optional[str]) -> None:
    """Unconditional overwrite of the refresh-token slot (None clears it)."""
    await User.filter(id=user_id).update(refresh_token=token)


async def rotate_refresh_token(user_id, expected: str, new_token: str) -> bool:
    """
    Compare-and-set on the refresh-token slot.

    Writes `new_token` only if the stored value still equals `expected`.
    Returns False when no row matched: the presented token was already rotated,
    cleared by logout, or never issued.
    """
    updated = await User.filter(id=user_id, refresh_token=expected).update(refresh_token=new_token)
    return updated > 0


async def update_profile_fields(user_id, **changes) -> Optional[UserOut]:
    """
    Apply a partial update (fullname, email, avatar_url, cover_image_url) and
    return the updated sanitized record, or None if the user is gone.

    Only the named columns are written, so a concurrent refresh-token write
    is never overwritten with a stale value.
    """
    allowed = {"fullname", "email", "avatar_url", "cover_image_url"}
    unknown = set(changes) - allowed
    if unknown:
        raise ValueError(f"unsupported profile fields: {sorted(unknown)}")

    user = await get_by_id(user_id)
    if user is None:
        return None
    for field, value in changes.items():
        setattr(user, field, value)
    try:
        await user.save(update_fields=[*changes.keys(), "updated_at"])
    except IntegrityError as exc:
        raise ConflictError("The email is already in use.") from exc
    return UserOut.from_user(user)
