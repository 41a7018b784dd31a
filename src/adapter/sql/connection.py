import os
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from adapter.sql.tables import Base

logger = logging.getLogger(__name__)

# Keep the driver quiet; statements are not echoed to the structured log
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

DEFAULT_DATABASE_URL = 'sqlite+aiosqlite:///./providers.db'
DATABASE_URL = os.getenv('DATABASE_URL', DEFAULT_DATABASE_URL)

_engine_cache: AsyncEngine | None = None
_sessionmaker_cache: async_sessionmaker[AsyncSession] | None = None


def reset_engine():
    global _engine_cache, _sessionmaker_cache
    _engine_cache = None
    _sessionmaker_cache = None


def get_engine() -> AsyncEngine:
    """Get the process-wide async engine, creating it on first use.

    The engine owns the connection pool shared by all requests.
    """
    global _engine_cache

    if _engine_cache is None:
        _engine_cache = create_async_engine(DATABASE_URL, pool_pre_ping=True)
        logger.info("[DATABASE] Engine created", extra={"dialect": _engine_cache.dialect.name})
    return _engine_cache


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    global _sessionmaker_cache

    if _sessionmaker_cache is None:
        _sessionmaker_cache = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _sessionmaker_cache


async def create_tables(engine: AsyncEngine | None = None) -> bool:
    """Create the provider and identity tables if they do not exist.

    Returns:
        True on success, False if the database rejected the DDL
    """
    engine = engine or get_engine()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        return True
    except SQLAlchemyError as e:
        logger.error("[DATABASE] Failed to create tables", extra={"error": str(e)[:200]})
        return False
