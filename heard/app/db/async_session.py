"""Async database session management for SQLAlchemy 2.0+.

The engine and session maker are created once per application in the
lifespan handler and stored on ``app.state``. Request handlers obtain a
session through the ``get_db`` dependency.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from heard.app.core.config import Settings
from heard.app.core.logging import get_logger
from heard.app.db.base import Base

logger = get_logger(__name__)


def create_engine_from_settings(config: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    SQLite (aiosqlite) is used for local runs and tests and keeps the
    driver's default pooling; PostgreSQL (asyncpg) gets a sized pool.
    """
    url = config.database_url

    if config.is_sqlite:
        engine = create_async_engine(url, echo=False)
        logger.info("Created SQLite async engine")
    else:
        engine = create_async_engine(
            url,
            echo=False,
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_recycle=config.db_pool_recycle,
            pool_pre_ping=True,
        )
        logger.info(
            f"Created PostgreSQL async engine (pool_size={config.db_pool_size}, "
            f"max_overflow={config.db_max_overflow})"
        )
    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_database(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped database session.

    Transaction handling:
    - Successful requests: changes are committed
    - Exceptions: changes are rolled back, exception is re-raised
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
