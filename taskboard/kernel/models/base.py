"""
Declarative base and shared columns.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, MetaData, func, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Keeps generated names in step with the Alembic migrations
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    type_annotation_map = {
        uuid.UUID: Uuid(),
    }


class TimestampMixin:
    """created_at / updated_at, filled in by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
