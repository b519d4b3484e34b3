"""
Database engine and per-request sessions.

PostgreSQL (asyncpg) is the production target. SQLite (aiosqlite) URLs are
supported for local runs; their table is created on startup since there is
no migration tooling to provision it.
"""
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from core.config import get_settings
from models import Base


def is_sqlite_url(database_url: str) -> bool:
    """Return True if `database_url` points at SQLite."""
    return make_url(database_url).get_backend_name() == "sqlite"


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create an async engine with options suited to the backend.

    An in-memory SQLite database lives in a single connection, so it is
    pinned with StaticPool; every session then sees the same data.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_async_engine(url, echo=False, pool_pre_ping=True)

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    return create_async_engine(url, echo=False, **options)


async def create_tables(db_engine: AsyncEngine) -> None:
    """Create the bookmarks table if it does not exist."""
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


settings = get_settings()

engine = build_engine(settings.database_url)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """
    Yield a session holding one request's unit of work.

    Services flush; the commit happens here once the route returns. Any
    exception rolls the request back and propagates.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
