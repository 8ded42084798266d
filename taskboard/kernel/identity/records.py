"""
Value types exchanged between the identity service and the user store.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class NewUser(BaseModel):
    """A user record about to be inserted. Holds the hash, never the password."""

    model_config = ConfigDict(frozen=True)

    email: str
    name: str
    password_hash: str
    avatar: Optional[str] = None


class UserRecord(NewUser):
    """A persisted user as returned by the store."""

    id: str


class UserIdentity(BaseModel):
    """Public view of a user. Has no password_hash field."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    avatar: Optional[str] = None


class AuthUser(BaseModel):
    """Result of a successful sign-up or sign-in."""

    user: UserIdentity
    token: str
