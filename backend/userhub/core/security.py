# userhub/core/security.py
"""
Security module for authentication.
Handles password hashing and the minting/verification of access and refresh tokens.
"""
import datetime as dt
import uuid
from dataclasses import dataclass
from typing import Any, Callable

import jwt  # PyJWT
from passlib.context import CryptContext

from userhub.config import settings
from userhub.core.exceptions import InternalError, InvalidTokenError

# Password hashing context
# Argon2 is a modern, salted, memory-hard password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)

    Note: Never store plain text passwords. Always use this function before saving.
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns False for a mismatch and for a missing or unparseable hash;
    this function never raises for a bad candidate.
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass(frozen=True)
class TokenPair:
    """Access + refresh token minted together for one user."""
    access_token: str
    refresh_token: str


class TokenService:
    """
    Stateless minting and verification of the two bearer token kinds.

    Access tokens are short-lived and carry denormalized profile claims so a
    caller can identify the user without a storage round trip. Refresh tokens
    are long-lived and carry only the subject id. Each kind has its own secret,
    so one can never be verified as the other.

    This class performs no I/O: persisting the refresh token (and checking a
    presented one against the stored value) is the caller's job.
    """

    def __init__(
        self,
        access_secret: str,
        access_ttl: dt.timedelta,
        refresh_secret: str,
        refresh_ttl: dt.timedelta,
        algorithm: str = JWT_ALG,
        clock: Callable[[], dt.datetime] = _utcnow,
    ):
        if access_secret == refresh_secret:
            raise ValueError("access and refresh tokens must use distinct secrets")
        self.access_secret = access_secret
        self.access_ttl = access_ttl
        self.refresh_secret = refresh_secret
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm
        self.clock = clock

    @classmethod
    def from_settings(cls, cfg=settings) -> "TokenService":
        return cls(
            access_secret=cfg.access_token_secret,
            access_ttl=dt.timedelta(minutes=cfg.access_token_expire_minutes),
            refresh_secret=cfg.refresh_token_secret,
            refresh_ttl=dt.timedelta(minutes=cfg.refresh_token_expire_minutes),
        )

    def _encode(self, claims: dict[str, Any], secret: str, ttl: dt.timedelta) -> str:
        now = self.clock()
        payload = {
            **claims,
            "iat": now,
            "exp": now + ttl,
            "jti": uuid.uuid4().hex,  # keeps two pairs minted in the same second distinct
        }
        try:
            return jwt.encode(payload, secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise InternalError("Something went wrong while generating tokens.") from exc

    def create_access_token(self, user) -> str:
        claims = {
            "sub": str(user.id),
            "username": user.username,
            "email": user.email,
            "fullname": user.fullname,
        }
        return self._encode(claims, self.access_secret, self.access_ttl)

    def create_refresh_token(self, user_id) -> str:
        return self._encode({"sub": str(user_id)}, self.refresh_secret, self.refresh_ttl)

    def issue_pair(self, user) -> TokenPair:
        """Mint a fresh access/refresh pair for `user` (needs id, username, email, fullname)."""
        return TokenPair(
            access_token=self.create_access_token(user),
            refresh_token=self.create_refresh_token(user.id),
        )

    def _decode(self, token: str, secret: str) -> dict:
        # Time claims are checked against self.clock, not PyJWT's wall clock
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token.") from exc

        try:
            expires_at = float(claims["exp"])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("Invalid token.") from exc
        if expires_at <= self.clock().timestamp():
            raise InvalidTokenError("Token has expired.")
        return claims

    def verify_access(self, token: str) -> dict:
        """Signature and expiry check only; storage is not consulted."""
        return self._decode(token, self.access_secret)

    def verify_refresh(self, token: str) -> dict:
        """Signature and expiry check. The replay check against storage is up to the caller."""
        return self._decode(token, self.refresh_secret)


token_service = TokenService.from_settings()
