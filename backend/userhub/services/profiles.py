"""
Profile operations: registration, account updates, avatar/cover replacement
and the public channel profile.
"""
import logging
from typing import Optional

from . import credential_store as store
from .media import MediaAttachmentManager
from .media_base import LocalFile
from ..core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from ..models.subscription import Subscription
from ..models.user import User
from ..schemas.user import ChannelProfileOut, RegisterInput, UpdateAccountIn, UserOut

logger = logging.getLogger("uvicorn.error")


def _check_email(email: str) -> None:
    if "@" not in email or email != email.lower():
        raise ValidationError("Email is invalid.")


async def register(
    body: RegisterInput,
    media: MediaAttachmentManager,
    avatar: Optional[LocalFile] = None,
    cover_image: Optional[LocalFile] = None,
) -> UserOut:
    """
    Create an account.

    Order of checks: fields present and non-blank -> username lower-case ->
    email valid -> username/email free -> avatar given -> avatar uploaded ->
    record created -> record re-read.
    """
    fields = [body.username, body.email, body.fullname, body.password]
    if any(value is None or value.strip() == "" for value in fields):
        raise ValidationError("All fields are required.")

    username = body.username.strip()
    email = body.email.strip()
    fullname = body.fullname.strip()

    if username != username.lower():
        raise ValidationError("Username should be in lower-case.")
    _check_email(email)

    if await store.find_by_username_or_email(username, email):
        raise ConflictError("The username or email already exists.")

    if avatar is None:
        raise ValidationError("Avatar is required.")
    uploaded_avatar = await media.upload(avatar)
    if uploaded_avatar is None:
        raise ValidationError("Avatar is required.")
    # A cover image that fails to upload is dropped, not fatal.
    uploaded_cover = await media.upload(cover_image) if cover_image else None
    cover_url = uploaded_cover.url if uploaded_cover else ""

    try:
        user = await store.create(
            username=username,
            email=email,
            fullname=fullname,
            password=body.password,
            avatar_url=uploaded_avatar.url,
            cover_image_url=cover_url,
        )
    except ConflictError:
        await media.discard(uploaded_avatar.url)
        await media.discard(cover_url)
        raise

    created = await store.get_sanitized(user.id)
    if created is None:
        raise InternalError("Something went wrong while registering the user.")
    logger.info("[profile] registered user=%s", created.id)
    return created


async def update_account(user: User, body: UpdateAccountIn) -> UserOut:
    """Update fullname and/or email; at least one is required."""
    fullname = (body.newFullname or "").strip()
    email = (body.newEmail or "").strip()
    if not fullname and not email:
        raise ValidationError("Fullname or email is required.")

    changes = {}
    if fullname:
        changes["fullname"] = fullname
    if email:
        _check_email(email)
        if email != user.email and await store.find_by_username_or_email(email=email):
            raise ConflictError("The email is already in use.")
        changes["email"] = email

    updated = await store.update_profile_fields(user.id, **changes)
    if updated is None:
        raise NotFoundError("User does not exist.")
    return updated


async def _replace_media(
    user: User,
    local: Optional[LocalFile],
    media: MediaAttachmentManager,
    field: str,
    label: str,
) -> UserOut:
    if local is None:
        raise ValidationError(f"{label} file is missing.")
    uploaded = await media.upload(local)
    if uploaded is None:
        raise ValidationError(f"Error while uploading {label.lower()}.")

    # Re-read the record for the URL being replaced; the guard's copy may be stale.
    current = await store.get_by_id(user.id)
    if current is None:
        await media.discard(uploaded.url)
        raise NotFoundError("User does not exist.")
    previous_url = getattr(current, field)

    updated = await store.update_profile_fields(user.id, **{field: uploaded.url})
    if updated is None:
        await media.discard(uploaded.url)
        raise NotFoundError("User does not exist.")

    # The new URL is persisted; only now is the old asset removed.
    if previous_url and previous_url != uploaded.url:
        await media.discard(previous_url)
    return updated


async def update_avatar(user: User, avatar: Optional[LocalFile], media: MediaAttachmentManager) -> UserOut:
    return await _replace_media(user, avatar, media, "avatar_url", "Avatar")


async def update_cover_image(
    user: User, cover_image: Optional[LocalFile], media: MediaAttachmentManager
) -> UserOut:
    return await _replace_media(user, cover_image, media, "cover_image_url", "Cover image")


async def get_channel_profile(username: Optional[str], viewer: User) -> ChannelProfileOut:
    """
    Public profile of `username` with subscription counts relative to `viewer`.
    """
    username = (username or "").strip().lower()
    if not username:
        raise ValidationError("Username is missing.")

    channel = await store.find_by_username(username)
    if channel is None:
        raise NotFoundError("Channel does not exist.")

    subscriber_count = await Subscription.filter(channel_id=channel.id).count()
    subscribed_to_count = await Subscription.filter(subscriber_id=channel.id).count()
    is_subscribed = await Subscription.filter(channel_id=channel.id, subscriber_id=viewer.id).exists()

    return ChannelProfileOut(
        id=str(channel.id),
        username=channel.username,
        email=channel.email,
        fullname=channel.fullname,
        avatar=channel.avatar_url,
        coverImage=channel.cover_image_url or "",
        subscriberCount=subscriber_count,
        subscribedToCount=subscribed_to_count,
        isSubscribed=is_subscribed,
    )
