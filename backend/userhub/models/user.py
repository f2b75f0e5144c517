# userhub/models/user.py
"""
Database model for users.
Represents a user account: identity fields, credential hash, media URLs and
the single live refresh token.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Subscriptions as subscriber (related_name="subscriptions")
    - Has many Subscriptions as channel (related_name="subscribers")

    Security:
    - Password is stored as an Argon2 hash, never plain text
    - Username and email are unique and stored lower-case
    - refresh_token holds at most one live value; writing a new one revokes the old
    - password_hash and refresh_token never leave the service (see schemas.user.UserOut)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    username = fields.CharField(max_length=64, unique=True, index=True)
    email = fields.CharField(max_length=256, unique=True, index=True)
    fullname = fields.CharField(max_length=128, index=True)
    password_hash = fields.CharField(max_length=255)
    avatar_url = fields.CharField(max_length=1024)  # Required after registration
    cover_image_url = fields.CharField(max_length=1024, default="")
    refresh_token = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"

    def __str__(self) -> str:
        return self.username
