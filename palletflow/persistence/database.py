"""Database engine and session management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (  # type: ignore[attr-defined]
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from palletflow.enterprise.config.settings import AppSettings, get_settings


class Base(DeclarativeBase):
    pass


metadata = Base.metadata

_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine(settings: Optional[AppSettings] = None) -> AsyncEngine:
    """Initialise (or return existing) async SQLAlchemy engine."""

    global _engine, _sessionmaker
    if _engine is not None:
        return _engine

    config = settings or get_settings()
    db = config.database
    if not db.enabled:
        raise RuntimeError("Database usage is disabled by configuration.")

    url = make_url(db.url)
    options: Dict[str, Any] = {"echo": db.echo}
    is_sqlite = url.get_backend_name() == "sqlite"
    if not is_sqlite:
        options.update(pool_size=db.pool_size, max_overflow=db.max_overflow)

    _engine = create_async_engine(url, **options)
    if is_sqlite:
        # SQLite ignores REFERENCES clauses unless asked per connection.
        event.listen(_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    _sessionmaker = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


def get_engine() -> AsyncEngine:
    if _engine is None:
        return init_engine()
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    if _sessionmaker is None:
        init_engine()
    assert _sessionmaker is not None
    return _sessionmaker


@asynccontextmanager
async def get_async_session() -> AsyncIterator[AsyncSession]:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        yield session


async def create_schema(engine: Optional[AsyncEngine] = None) -> None:
    """Create any missing tables for the registered ORM models."""

    from . import models  # noqa: F401  registers tables on the metadata

    target = engine or get_engine()
    async with target.begin() as connection:
        await connection.run_sync(metadata.create_all)


async def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine."""

    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None
