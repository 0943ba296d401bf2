"""Async database engine and session management.

One engine per process, created lazily in the running event loop and
disposed of on shutdown. Sessions commit on success and roll back on error.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from contextweaver.config import get_settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


@dataclass
class _Engine:
    engine: AsyncEngine | None = None
    sessions: async_sessionmaker[AsyncSession] | None = None


_current = _Engine()


def get_database_url() -> str:
    """The configured database URL.

    Raises:
        ValueError: If DATABASE__URL is not configured.
    """
    url = get_settings().database.url
    if not url:
        msg = "DATABASE__URL is not configured"
        raise ValueError(msg)
    return url


def get_engine() -> AsyncEngine | None:
    """The current engine, or None before ``init_db``."""
    return _current.engine


def _log_dropped_connections(engine: AsyncEngine) -> None:
    # Pre-ping and recycle replace dead connections silently otherwise
    @event.listens_for(engine.sync_engine.pool, "invalidate")
    def _on_invalidate(
        _dbapi_conn: object, _record: object, exception: BaseException | None
    ) -> None:
        logger.warning(
            "Dropped pooled connection (%s)",
            type(exception).__name__ if exception else "recycled",
        )


async def init_db() -> None:
    """Create the engine and session factory.

    Registered with ``app.on_startup`` when the database backend is active.
    """
    settings = get_settings()
    engine = create_async_engine(
        get_database_url(),
        echo=settings.dev.database_echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=3600,
        connect_args={"timeout": 10, "command_timeout": 30},
    )
    _log_dropped_connections(engine)
    _current.engine = engine
    _current.sessions = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    logger.info("Database engine ready")


async def close_db() -> None:
    """Dispose of the engine, if one was created."""
    if _current.engine is None:
        return
    await _current.engine.dispose()
    _current.engine = None
    _current.sessions = None


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Open a session that commits on exit.

    Errors are logged, rolled back and re-raised.

    Usage:
        async with get_session() as session:
            doc = await session.get(Document, doc_id)
    """
    if _current.sessions is None:
        await init_db()
    sessions = _current.sessions
    assert sessions is not None

    async with sessions() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.exception("Database session failed, rolling back")
            await session.rollback()
            raise
