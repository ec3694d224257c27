from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Database Engine
# -----------------------------------------------------------------------------
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    future=True,
)

# -----------------------------------------------------------------------------
# Session Maker
# -----------------------------------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# -----------------------------------------------------------------------------
# Declarative Base
# -----------------------------------------------------------------------------
class Base(DeclarativeBase):
    pass

# -----------------------------------------------------------------------------
# Dependency
# -----------------------------------------------------------------------------
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency to provide a database session.
    Ensures the session is closed after the request is processed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

# -----------------------------------------------------------------------------
# Lifecycle Utilities
# -----------------------------------------------------------------------------
async def init_db():
    """
    Initialize database tables.
    Useful for creating tables in development.
    """
    # Mapped classes must be imported before create_all sees their tables
    import models.employee  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready (%s)", engine.url.render_as_string(hide_password=True))

async def drop_db():
    """Drop every table. Used by the test suite."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

async def close_db():
    """
    Close the database engine.
    Should be called on application shutdown.
    """
    await engine.dispose()
