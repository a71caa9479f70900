"""Standalone Session Factory — DB sessions outside the FastAPI request cycle.

Invariants:
    - Same engine options as DatabaseSessionManager (pool sizing skipped for SQLite)
    - The caller owns the engine: dispose it via factory.kw["bind"]

Design Decisions:
    - Used by `python -m app.seed`, which runs without the app lifespan
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.infrastructure.database import engine_options


def create_session_factory(
    database_url: str, pool_size: int = 5, max_overflow: int = 0,
) -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine(
        database_url, **engine_options(database_url, pool_size, max_overflow),
    )
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
