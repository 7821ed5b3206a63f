"""
Tests for the storage layer: adapter selection, connection setup, sample
data and the write transaction helper.
"""

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.exc import OperationalError

from business_api.core.exceptions import InvalidArgumentError, StorageFailureError
from business_api.db.models import Business, Location
from business_api.db.seed import SAMPLE_BUSINESSES, seed_if_empty
from business_api.db.sqlite_adapter import SQLiteAdapter, get_database_adapter
from business_api.services.unit_of_work import write_transaction


class TestAdapterSelection:

    def test_sqlite_urls(self):
        assert isinstance(get_database_adapter("sqlite+aiosqlite:///./businesses.db"), SQLiteAdapter)
        assert isinstance(get_database_adapter("sqlite:///:memory:"), SQLiteAdapter)

    def test_unsupported_url(self):
        with pytest.raises(ValueError, match="postgresql"):
            get_database_adapter("postgresql+asyncpg://user@localhost/businesses")


@pytest.mark.asyncio
async def test_connections_enforce_foreign_keys(session):
    result = await session.execute(text("PRAGMA foreign_keys"))
    assert result.scalar_one() == 1


@pytest.mark.asyncio
async def test_seed_if_empty_skips_populated_store(session):
    assert await seed_if_empty(session) == 0

    count = await session.execute(select(func.count()).select_from(Business))
    assert count.scalar_one() == len(SAMPLE_BUSINESSES)


class TestWriteTransaction:
    """Test the translation of storage errors."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self, session):
        async with write_transaction(session, "add business"):
            session.add(Business(name="Committed Business"))

        result = await session.execute(select(Business).where(Business.name == "Committed Business"))
        assert result.scalar_one_or_none() is not None

    @pytest.mark.asyncio
    async def test_constraint_violation_is_invalid_argument(self, session):
        with pytest.raises(InvalidArgumentError, match="Unable to add business"):
            async with write_transaction(session, "add business"):
                session.add(Business(name="Sample Business #1"))
                await session.flush()

    @pytest.mark.asyncio
    async def test_orphan_child_is_rejected(self, session):
        """Children must reference an existing business."""
        with pytest.raises(InvalidArgumentError):
            async with write_transaction(session, "add location"):
                session.add(Location(business_id="no-such-business", name="Nowhere"))
                await session.flush()

    @pytest.mark.asyncio
    async def test_other_errors_are_storage_failures(self, session):
        with pytest.raises(StorageFailureError) as exc_info:
            async with write_transaction(session, "update business"):
                raise OperationalError("UPDATE businesses", {}, Exception("database is locked"))

        assert isinstance(exc_info.value.original_error, OperationalError)
        assert exc_info.value.http_status == 500
