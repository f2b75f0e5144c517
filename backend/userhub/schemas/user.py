# userhub/schemas/user.py
"""
Pydantic schemas for user-facing profile data.

UserOut is the sanitized projection of a User record: it has no field for the
password hash or the refresh token, so neither can leak into a response.
"""
import datetime as dt
from typing import Optional

from pydantic import BaseModel


class RegisterInput(BaseModel):
    """
    Registration fields as submitted in the multipart form.
    Fields stay optional here; registration reports missing/blank values itself.
    """
    username: Optional[str] = None
    email: Optional[str] = None
    fullname: Optional[str] = None
    password: Optional[str] = None


class UpdateAccountIn(BaseModel):
    """At least one of the two fields must be present."""
    newFullname: Optional[str] = None
    newEmail: Optional[str] = None


class UserOut(BaseModel):
    """
    Sanitized user projection returned by every endpoint.
    """
    id: str  # User unique identifier
    username: str  # Lower-case login name
    email: str  # Lower-case email address
    fullname: str  # Display name
    avatar: str  # Avatar URL on the media host
    coverImage: str = ""  # Cover image URL ("" when not set)
    createdAt: Optional[dt.datetime] = None
    updatedAt: Optional[dt.datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserOut":
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            fullname=user.fullname,
            avatar=user.avatar_url,
            coverImage=user.cover_image_url or "",
            createdAt=user.created_at,
            updatedAt=user.updated_at,
        )


class ChannelProfileOut(BaseModel):
    """
    Public channel view of a user, joined with subscription counts.
    isSubscribed is relative to the viewing user.
    """
    id: str
    username: str
    email: str
    fullname: str
    avatar: str
    coverImage: str = ""
    subscriberCount: int = 0
    subscribedToCount: int = 0
    isSubscribed: bool = False
