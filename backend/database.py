"""
Database engine and session management for the GameHub backend.

Uses the SQLAlchemy async engine (aiomysql in production, aiosqlite in tests)
so queries never block the event loop. Tables are auto-created on server
startup via init_db().

Connection pool: a fixed-size QueuePool (DB_POOL_SIZE, no overflow) with no
checkout timeout, so a burst of requests queues for a connection instead of
being rejected.
"""
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


# ── Engine ──────────────────────────────────────────────────────────

def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database."""
    url = settings.sqlalchemy_url

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory SQLite lives and dies with a single connection
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
    else:
        kwargs = {
            "pool_size": settings.db_pool_size,
            "max_overflow": 0,
            "pool_timeout": None,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
        }

    return create_async_engine(url, echo=settings.db_echo, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ── Helpers ─────────────────────────────────────────────────────────

async def init_db(engine: AsyncEngine) -> None:
    """Create all tables. Called once on server startup."""
    # Import models so Base.metadata knows about them
    import db_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created (or already exist)")


async def ping(engine: AsyncEngine) -> bool:
    """Return True if the database answers a trivial query."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database ping failed: {e}")
        return False

