from typing import Any, Optional, cast

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from .config import Settings

# Database engine and session factory used by the SQL flag store
engine: Optional[Any] = None
AsyncDbSessionFactory: Any = None


def database_url_for(settings: Settings) -> str:
    # Allow a full DATABASE URL override (useful for tests)
    if settings.database_url:
        return settings.database_url
    return f"postgresql+asyncpg://{settings.db_user}:{settings.db_password}@{settings.db_host}:{settings.db_port}/{settings.db_name}"


def create_engine(settings: Settings) -> Any:
    """Create and return an async engine for the given settings and register it
    on the module so other modules (or tests) can rebind or inspect it.

    - pool_pre_ping: test connection health before use
    - command_timeout: 30-second query timeout (PostgreSQL only)
    """
    global engine
    database_url = database_url_for(settings)

    # Only add command_timeout for PostgreSQL (asyncpg driver supports it)
    connect_args = {}
    if "postgresql" in database_url:
        connect_args["command_timeout"] = 30

    engine = create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    return engine


def create_sessionmaker(bind_engine: Any) -> Any:
    """Create and register an AsyncSession factory bound to the provided engine."""
    global AsyncDbSessionFactory
    AsyncDbSessionFactory = cast(
        Any, sessionmaker(bind=bind_engine, expire_on_commit=False, class_=AsyncSession)
    )  # type: ignore[call-overload]
    return AsyncDbSessionFactory


async def dispose_engine() -> None:
    global engine, AsyncDbSessionFactory
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncDbSessionFactory = None
