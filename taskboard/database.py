"""
Database connection and session management.
Uses SQLAlchemy 2.0 async pattern.

The engine is created once per process and backs the user store; the
FastAPI lifespan creates the tables on startup and disposes the pool on
shutdown.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from taskboard.config import get_settings


def _set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign keys and wait on locks instead of failing at once."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Build an async engine suited to the backend named in ``database_url``.

    SQLite files get a fresh connection per session (NullPool); in-memory
    SQLite keeps one shared connection (StaticPool) so every session sees
    the same database. Anything else gets a pre-pinged connection pool.
    """
    if database_url.startswith("sqlite"):
        in_memory = ":memory:" in database_url
        engine = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool if in_memory else NullPool,
        )
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


settings = get_settings()

engine = create_engine_for(settings.database_url, echo=settings.debug)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def init_db() -> None:
    """Create the users table if it does not exist yet."""
    from taskboard.kernel.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
