"""Async SQLAlchemy engine and session factory helpers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


def create_session_factory(database_url: str) -> async_sessionmaker[AsyncSession]:
    """Create a reusable async session factory for the provided database URL.

    Postgres URLs (`postgresql+asyncpg://`) get connection liveness checks;
    SQLite URLs are used as-is for local runs and tests.
    """

    engine_options: dict[str, object] = {}
    if not database_url.startswith("sqlite"):
        engine_options["pool_pre_ping"] = True
    engine = create_async_engine(database_url, **engine_options)
    return async_sessionmaker(engine, expire_on_commit=False)
