# marketplace/db.py
import os
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .tables import Base

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./marketplace.db"

_engine: Optional[AsyncEngine] = None
_SessionLocal: Optional[async_sessionmaker] = None


def _install_sqlite_locking(engine: AsyncEngine) -> None:
    # pysqlite defers BEGIN until the first write; take the write lock up front
    # so read-check-write inside one transaction cannot interleave.
    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def configure(db_url: Optional[str] = None) -> AsyncEngine:
    """(Re)build the engine and session factory for ``db_url``.

    Falls back to ``DATABASE_URL`` from the environment, then to a local
    SQLite file.
    """
    global _engine, _SessionLocal
    db_url = db_url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
    echo = os.getenv("DB_ECHO", "").lower() in ("1", "true", "yes")
    if db_url.startswith("sqlite"):
        _engine = create_async_engine(db_url, echo=echo)
        _install_sqlite_locking(_engine)
    else:
        _engine = create_async_engine(db_url, echo=echo, pool_size=5, max_overflow=10)
    _SessionLocal = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


def _ensure_engine():
    if _engine is None:
        configure()


def session_factory() -> async_sessionmaker:
    _ensure_engine()
    return _SessionLocal


async def init_models():
    _ensure_engine()
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose():
    global _engine, _SessionLocal
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _SessionLocal = None


async def get_session() -> AsyncIterator[AsyncSession]:
    _ensure_engine()
    async with _SessionLocal() as session:
        yield session
