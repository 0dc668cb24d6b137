"""
Database connection and session management.

Provides async sessions for FastAPI and sync sessions for scripts such as
the seeding utility.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from streamguide.config import get_config
from streamguide.database.models.base import Base

logger = logging.getLogger(__name__)

# Async engine and session factory (for FastAPI)
_async_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None

# Sync engine (for scripts)
_sync_engine = None
_sync_session_factory = None


def _get_async_url(url: str) -> str:
    """Convert sync database URL to async variant."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///")
    elif url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://")
    return url


def _get_sync_url(url: str) -> str:
    """Convert async database URL to its sync driver."""
    return url.replace("sqlite+aiosqlite://", "sqlite://").replace(
        "postgresql+asyncpg://", "postgresql://"
    )


def _get_pool_kwargs(url: str) -> dict[str, Any]:
    """Get pool configuration for the database type."""
    # SQLite needs a single shared connection, especially for :memory:
    if "sqlite" in url:
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }

    return {
        "poolclass": QueuePool,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 30,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }


def _enable_sqlite_foreign_keys(engine: Any) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on."""

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(
    url: str,
    echo: bool = False,
    **engine_kwargs: Any,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """
    Create an async engine and session factory for ``url``.

    ``engine_kwargs`` replace the default pool settings when given.
    """
    async_url = _get_async_url(url)
    engine = create_async_engine(
        async_url,
        echo=echo,
        future=True,
        **(engine_kwargs or _get_pool_kwargs(async_url)),
    )
    if "sqlite" in async_url:
        _enable_sqlite_foreign_keys(engine.sync_engine)

    factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return engine, factory


async def init_db(url: Optional[str] = None) -> None:
    """
    Initialize the database connection and create tables.

    Args:
        url: Database URL; defaults to ``database.url`` from configuration.
    """
    global _async_engine, _async_session_factory

    config = get_config()
    _async_engine, _async_session_factory = create_session_factory(
        url or config.database.url, echo=config.database.echo
    )

    async with _async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"Database initialized: {_async_engine.url.render_as_string(hide_password=True)}")


def init_sync_db(url: Optional[str] = None) -> None:
    """Initialize synchronous database connection (for scripts)."""
    global _sync_engine, _sync_session_factory

    config = get_config()
    sync_url = _get_sync_url(url or config.database.url)

    _sync_engine = create_engine(
        sync_url,
        echo=config.database.echo,
        future=True,
        **_get_pool_kwargs(sync_url),
    )
    if "sqlite" in sync_url:
        _enable_sqlite_foreign_keys(_sync_engine)

    _sync_session_factory = sessionmaker(
        _sync_engine,
        class_=Session,
        expire_on_commit=False,
    )

    Base.metadata.create_all(_sync_engine)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session."""
    if _async_session_factory is None:
        await init_db()

    async with _async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with get_session() as session:
        yield session


def get_sync_session() -> Session:
    """Get a synchronous database session."""
    if _sync_session_factory is None:
        init_sync_db()
    return _sync_session_factory()


async def close_db() -> None:
    """Close database connections and cleanup."""
    global _async_engine, _async_session_factory

    if _async_engine is not None:
        await _async_engine.dispose()
        _async_engine = None
        _async_session_factory = None
