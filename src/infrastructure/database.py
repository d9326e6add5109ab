"""Async SQLAlchemy engine, session factory, and session dependency."""

from collections.abc import AsyncGenerator

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///:memory:"
    database_echo: bool = False


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine described by ``settings``.

    An in-memory SQLite database only lives as long as its connection, so it
    is served from a single shared connection.
    """
    options: dict = {"echo": settings.database_echo, "pool_pre_ping": True}
    if settings.database_url.startswith("sqlite") and ":memory:" in settings.database_url:
        options["poolclass"] = StaticPool
    return create_async_engine(settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


settings = Settings()

engine = build_engine(settings)

AsyncSessionLocal = build_session_factory(engine)


class Base(DeclarativeBase):
    """Shared declarative base; its registry and metadata hold every mapping."""


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a transactional async session; commits on success, rolls back on error."""
    async with AsyncSessionLocal() as session:
        async with session.begin():
            yield session
