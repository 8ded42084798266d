"""
User store: the outbound collaborator holding user records.

The identity service needs exactly two operations, insert and find-by-email.
``insert_one`` must raise DuplicateEmailError when the email is taken and
PersistenceError for any other failure; the service never pre-checks
uniqueness.
"""

from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskboard.kernel.identity.errors import DuplicateEmailError, PersistenceError
from taskboard.kernel.identity.records import NewUser, UserRecord
from taskboard.kernel.models.user import User
from taskboard.logging_config import get_logger

logger = get_logger(__name__)


class UserStore(Protocol):
    """Keyed collection of user records."""

    async def insert_one(self, record: NewUser) -> str:
        """Persist ``record`` and return the store-assigned id."""

    async def find_one(self, email: str) -> Optional[UserRecord]:
        """Return the record registered under ``email``, if any."""


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=str(user.id),
        email=user.email,
        name=user.name,
        password_hash=user.password_hash,
        avatar=user.avatar,
    )


class SqlAlchemyUserStore:
    """
    UserStore over the ``users`` table.

    Each call runs in its own short session from the shared session factory.
    Duplicate emails are caught by the unique index on ``users.email``.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def insert_one(self, record: NewUser) -> str:
        user = User(
            email=record.email,
            name=record.name,
            password_hash=record.password_hash,
            avatar=record.avatar,
        )
        try:
            async with self.session_maker() as session:
                async with session.begin():
                    session.add(user)
                    await session.flush()  # Get the ID
                    user_id = str(user.id)
        except IntegrityError as e:
            raise DuplicateEmailError(record.email) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error("User insert failed", extra={"error": type(e).__name__})
            raise PersistenceError("User store rejected the insert") from e
        return user_id

    async def find_one(self, email: str) -> Optional[UserRecord]:
        query = select(User).where(User.email == email)
        try:
            async with self.session_maker() as session:
                result = await session.execute(query)
                user = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            logger.error("User lookup failed", extra={"error": type(e).__name__})
            raise PersistenceError("User store is unavailable") from e
        return _to_record(user) if user else None
