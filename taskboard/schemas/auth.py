"""
Authentication schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SignUpInput(BaseModel):
    """User registration request."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=1024)
    name: str = Field(..., max_length=255)
    avatar: Optional[str] = Field(None, max_length=2048)


class SignInInput(BaseModel):
    """User login request."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=1024)


class UserResponse(BaseModel):
    """Public user profile. Never carries the password hash."""

    id: str
    name: str
    email: str
    avatar: Optional[str] = None

    class Config:
        from_attributes = True


class AuthUserResponse(BaseModel):
    """Authenticated user plus session token."""

    user: UserResponse
    token: str

    class Config:
        from_attributes = True


class TokenClaimsResponse(BaseModel):
    """Identity claims carried by the caller's token."""

    user_id: str
    email: str
    expires_at: datetime
