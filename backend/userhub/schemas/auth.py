# userhub/schemas/auth.py
"""
Pydantic schemas for session endpoints.
Typed inputs for login, refresh and password change.
Presence/blankness rules live in the services so every failure maps to the
same error envelope; these models only fix the shape of the body.
"""
from pydantic import BaseModel
from typing import Optional

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    Either username or email identifies the account.
    """
    username: Optional[str] = None  # User login name
    email: Optional[str] = None  # Account email (alternative identifier)
    password: Optional[str] = None  # Plain text password, verified against the stored hash

class RefreshTokenIn(BaseModel):
    """Body fallback when the refreshToken cookie is not available."""
    refreshToken: Optional[str] = None

class ChangePasswordIn(BaseModel):
    oldPassword: Optional[str] = None
    newPassword: Optional[str] = None

class TokenPairOut(BaseModel):
    """Tokens returned alongside the cookies."""
    accessToken: str
    refreshToken: str
