"""
SQLite Backend

Default (and currently only) store: a single file accessed through the
aiosqlite driver.

SQLite specifics handled here:
- Foreign keys are off by default and must be switched on per connection,
  otherwise deleting a business leaves its children behind
- Connections are not pooled (NullPool); each session opens its own
- The driver runs on a worker thread, so same-thread checking is disabled
"""

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from business_api.core.setting import settings
from business_api.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """aiosqlite-backed DatabaseAdapter."""

    dialect_name = "sqlite"

    def create_engine(self, database_url: str, **overrides) -> AsyncEngine:
        """
        Build an engine whose connections enforce foreign keys.

        Args:
            database_url: e.g. sqlite+aiosqlite:///./businesses.db
            **overrides: Replace entries of engine_options()

        Returns:
            AsyncEngine with the on_connect listener registered
        """
        options = {**self.engine_options(), **overrides}

        engine = create_async_engine(
            database_url,
            poolclass=self.pool_class(),
            connect_args=self.connect_args(),
            **options
        )
        # Pool events fire on the sync engine wrapped by the AsyncEngine
        event.listen(engine.sync_engine, "connect", self.on_connect)
        return engine

    def pool_class(self) -> type[NullPool]:
        return NullPool

    def connect_args(self) -> dict[str, Any]:
        return {"check_same_thread": False}

    def engine_options(self) -> dict[str, Any]:
        return {"echo": settings.DATABASE_ECHO}

    def on_connect(self, dbapi_connection: Any, connection_record: Any) -> None:
        """Turn on foreign key enforcement so ON DELETE CASCADE applies."""
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()


ADAPTERS: tuple[type[DatabaseAdapter], ...] = (SQLiteAdapter,)


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Pick the adapter for a database URL.

    Raises:
        ValueError: If no adapter supports the URL's dialect
    """
    for adapter_class in ADAPTERS:
        adapter = adapter_class()
        if adapter.supports(database_url):
            return adapter
    raise ValueError(f"Unsupported DATABASE_URL dialect: {database_url.split(':', 1)[0]}")
