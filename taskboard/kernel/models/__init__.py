"""
SQLAlchemy models for the Taskboard kernel.
"""

from taskboard.kernel.models.base import Base, TimestampMixin
from taskboard.kernel.models.user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
]
