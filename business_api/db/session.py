"""
Engine and Session Handling

One AsyncEngine per process, built by the adapter matching DATABASE_URL, and
one AsyncSession per request.

The request session commits when the endpoint returns normally and rolls
back when anything raises, so a half-finished write (e.g. a business whose
nested hours were rejected) never becomes visible.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from business_api.core.setting import settings
from business_api.db.sqlite_adapter import get_database_adapter

db_adapter = get_database_adapter(settings.DATABASE_URL)
engine = db_adapter.create_engine(settings.DATABASE_URL)


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """
    Session factory for an engine.

    Tests call this with their own per-test engine.
    """
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        # Loaded rows stay readable after the write transaction commits
        expire_on_commit=False,
        autoflush=False,
    )


async_session_maker = build_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding the request's session.

    Usage:
        async def endpoint(session: AsyncSession = Depends(get_session)): ...
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
