"""
Signed access tokens for authenticated sessions.

Tokens are JWTs signed with the server-held secret. Every issuance gets a
fresh ``jti`` so no two tokens are alike, and ``exp`` bounds their lifetime.
Verification needs only the secret, never a database lookup.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict

from taskboard.config import get_settings

TOKEN_TYPE_ACCESS = "access"


class AccessTokenPayload(BaseModel):
    """Decoded access token claims."""

    model_config = ConfigDict(from_attributes=True)

    sub: str  # User ID
    email: str
    exp: datetime
    iat: datetime
    jti: str


class TokenIssuer(Protocol):
    """What the identity service needs from a token mechanism."""

    def issue_token(self, user_id: str, email: str) -> str:
        """Return a fresh token proving the holder is ``user_id``."""

    def verify_access_token(self, token: str) -> Optional[AccessTokenPayload]:
        """Return the token's claims, or None if it is not valid."""


class JWTManager:
    """
    JWT token creation and verification.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_token_expire_minutes: Optional[int] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm
        self.access_token_expire_minutes = (
            access_token_expire_minutes
            if access_token_expire_minutes is not None
            else settings.access_token_expire_minutes
        )

    def create_access_token(
        self,
        user_id: str,
        email: str,
        expires_delta: Optional[timedelta] = None,
    ) -> tuple[str, datetime, str]:
        """
        Create a new access token.

        Args:
            user_id: User's unique identifier
            email: User's email
            expires_delta: Optional custom expiration time

        Returns:
            Tuple of (token, expiration_datetime, token_id)
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))
        jti = str(uuid.uuid4())

        payload = {
            "sub": str(user_id),
            "email": email,
            "exp": expire,
            "iat": now,
            "jti": jti,
            "type": TOKEN_TYPE_ACCESS,
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        return token, expire, jti

    def issue_token(self, user_id: str, email: str) -> str:
        """Create an access token with the default lifetime."""
        token, _, _ = self.create_access_token(user_id, email)
        return token

    def verify_access_token(self, token: str) -> Optional[AccessTokenPayload]:
        """
        Verify and decode an access token.

        Args:
            token: JWT access token

        Returns:
            AccessTokenPayload if valid, None for a bad signature, an expired
            token, a token of another type or anything that is not a JWT
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
        except JWTError:
            return None

        if payload.get("type") != TOKEN_TYPE_ACCESS:
            return None

        try:
            return AccessTokenPayload(
                sub=payload["sub"],
                email=payload["email"],
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                jti=payload["jti"],
            )
        except (KeyError, TypeError, ValueError):
            return None


# Default manager instance
_jwt_manager: Optional[JWTManager] = None


def get_jwt_manager() -> JWTManager:
    """Get or create the default JWT manager."""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager()
    return _jwt_manager
