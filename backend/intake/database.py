"""
Adoption Intake Backend: Database Session Management
=======================================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       FastAPI session dependency.
How:   One engine per process with connection pooling; one session per
       request that commits on success and rolls back on error.
Who:   Route handlers receive sessions through Depends(get_db_session);
       services receive them as their first argument.

Connection Pooling:
    pool_size=20, max_overflow=10 (at most 30 connections), pre-ping on
    checkout, recycle hourly. SQLite URLs (tests, local demos) skip the pool
    arguments because their pool classes do not accept them.
"""

from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import DateTime
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from intake.config import settings


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp column that always round-trips as UTC.

    PostgreSQL keeps the offset natively. SQLite stores naive text, so values
    are normalized to UTC on the way in and tagged as UTC on the way out.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def build_engine_kwargs(database_url: str) -> Dict[str, Any]:
    """Engine options for the given URL."""
    kwargs: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    # SQLite engines reject the queue-pool sizing arguments.
    if not database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return kwargs


# ── Engine & Session Factory ──────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **build_engine_kwargs(settings.database_url))

# expire_on_commit=False: response models are built from ORM objects after
# the request transaction has committed.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for autogenerate.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Commits when the handler returns normally, rolls back and re-raises on any
    exception, and always closes the session to return its connection to the
    pool. A failed submit or upload therefore never leaves a partial write.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Closes all pooled connections. Called from the lifespan on shutdown."""
    await engine.dispose()
