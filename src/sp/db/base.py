"""Async engine and session lifecycle for the planner database."""

from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from sp.config import Settings, get_settings

Base = declarative_base()

# Set by init_db(), cleared by close_db()
engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def engine_options(settings: Settings) -> Dict[str, Any]:
    """Engine keyword arguments for the configured database URL."""
    options: Dict[str, Any] = {"pool_pre_ping": True, "echo": settings.debug}

    if not _is_sqlite(settings.db_url):
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    elif ":memory:" in settings.db_url:
        # One shared connection, otherwise every checkout sees an empty database
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}

    return options


async def create_tables(target: AsyncEngine) -> None:
    """Create every planner table that does not exist yet."""
    import sp.models  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db() -> None:
    """Open the engine and session factory.

    Postgres schemas are managed by Alembic; SQLite databases (tests, local
    experiments) get their tables created here.
    """
    global engine, AsyncSessionLocal

    settings = get_settings()
    engine = create_async_engine(settings.db_url, **engine_options(settings))
    AsyncSessionLocal = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    if _is_sqlite(settings.db_url):
        await create_tables(engine)


async def close_db() -> None:
    """Dispose of the engine and forget the session factory."""
    global engine, AsyncSessionLocal

    if engine is None:
        return
    await engine.dispose()
    engine = None
    AsyncSessionLocal = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits on success, rolls back on error."""
    if AsyncSessionLocal is None:
        await init_db()

    assert AsyncSessionLocal is not None

    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
