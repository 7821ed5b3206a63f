"""
Database Backend Interface

The service only talks to its store through an AsyncEngine. Everything that
differs between backends (pooling, driver arguments, per-connection setup)
sits behind DatabaseAdapter, so the rest of the code never checks which
database it runs on.

A backend must at least guarantee:
- Foreign keys with ON DELETE CASCADE are enforced (deleting a business
  removes its locations, hours, services and reviews)
- Unique and check constraints are enforced (they surface as IntegrityError,
  which the services report as invalid input)
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Contract for a database backend.

    Implementations build the engine and configure each new connection.
    """

    dialect_name: str = ""

    @abstractmethod
    def create_engine(self, database_url: str, **overrides) -> AsyncEngine:
        """
        Build the async engine for this backend.

        Args:
            database_url: SQLAlchemy async URL
            **overrides: Engine options replacing the backend defaults
        """

    @abstractmethod
    def pool_class(self) -> Optional[type[Pool]]:
        """Pool implementation to use, or None for SQLAlchemy's default."""

    @abstractmethod
    def connect_args(self) -> dict[str, Any]:
        """Arguments passed through to the DBAPI driver's connect()."""

    @abstractmethod
    def engine_options(self) -> dict[str, Any]:
        """Default create_async_engine() keyword arguments."""

    @abstractmethod
    def on_connect(self, dbapi_connection: Any, connection_record: Any) -> None:
        """
        Prepare a freshly opened DBAPI connection.

        Registered as the engine's "connect" event listener.
        """

    def supports(self, database_url: str) -> bool:
        """True when the URL targets this backend's dialect."""
        return database_url.split(":", 1)[0].split("+", 1)[0] == self.dialect_name
