"""
Shared Test Fixtures

Every test gets its own SQLite database file under pytest's tmp_path, with
the schema created and the sample businesses loaded. Nothing is shared
between tests: the application's get_session dependency is overridden to use
the per-test engine, and rate limiting is switched off.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlmodel import SQLModel

from business_api.core.rate_limit import limiter
from business_api.db import models  # noqa: F401  (registers the tables)
from business_api.db.models import Business
from business_api.db.seed import seed_sample_data
from business_api.db.session import build_session_maker, get_session
from business_api.db.sqlite_adapter import SQLiteAdapter
from business_api.main import app


@pytest.fixture
async def db_engine(tmp_path):
    """A fresh database with the schema created."""
    engine = SQLiteAdapter().create_engine(f"sqlite+aiosqlite:///{tmp_path / 'businesses.db'}")
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_maker(db_engine):
    """Session factory for a database seeded with the three sample businesses."""
    maker = build_session_maker(db_engine)
    async with maker() as session:
        await seed_sample_data(session)
    return maker


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def business_ids(session_maker) -> dict[str, str]:
    """Sample business name -> id (ids are generated at seed time)."""
    async with session_maker() as session:
        result = await session.execute(select(Business.name, Business.id))
        return {name: business_id for name, business_id in result.all()}


@pytest.fixture
async def client(session_maker):
    """HTTP client for the app, bound to the per-test database."""

    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    limiter.enabled = False

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    limiter.enabled = True
    app.dependency_overrides.clear()
