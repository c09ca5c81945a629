"""
Database Engine and Session Management

SQLite (aiosqlite) for local development and tests, PostgreSQL (asyncpg)
in production. Both are driven through the SQLAlchemy async ORM.
"""
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog

from airops.config import settings

logger = structlog.get_logger()


class Base(DeclarativeBase):
    """Declarative base for flights, fare sheets, admins and login activity."""
    pass


def _prepare_sqlite_file(database: str) -> None:
    """Make sure the directory holding a file-backed SQLite database exists."""
    if not database or database == ":memory:":
        return
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    # created_by / updated_by / user_id use ON DELETE SET NULL
    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine with per-backend connection options."""
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        _prepare_sqlite_file(url.database)
        sqlite_engine = create_async_engine(
            database_url,
            echo=settings.database_echo,
            connect_args={"check_same_thread": False},
        )
        _enable_sqlite_foreign_keys(sqlite_engine)
        return sqlite_engine

    return create_async_engine(
        database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


engine = build_engine(settings.database_url)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


def _register_models() -> None:
    # Importing the package registers every table on Base.metadata
    import airops.models  # noqa: F401


async def init_db(reset: bool = False):
    """Create missing tables; ``reset`` drops everything first."""
    _register_models()
    try:
        async with engine.begin() as conn:
            if reset:
                await conn.run_sync(Base.metadata.drop_all)
                logger.warning("Dropped all tables")
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error("Error initializing database", error=str(e))
        raise


async def close_db():
    await engine.dispose()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session dependency.

    Commits when the endpoint returns, rolls back when it raises.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """
    Transactional session for scripts outside a request.

    Usage:
        async with session_scope() as db:
            db.add(flight)
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
