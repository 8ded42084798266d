"""
User account table backing the identity store.
"""

import uuid
from typing import Optional

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.kernel.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Registered user. Only ever written once, at sign-up."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    avatar: Mapped[Optional[str]] = mapped_column(
        String(2048),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.id}>"
