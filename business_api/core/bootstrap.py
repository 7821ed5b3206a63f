"""
Application Startup and Shutdown

This module prepares the database when the application starts and releases
it on shutdown.

Design:
- Logging is configured once from LOG_LEVEL
- Missing tables are created from the SQLModel metadata when
  CREATE_SCHEMA_ON_STARTUP is set (Alembic migrations remain the source of
  truth for managed deployments)
- Sample data is loaded when SEED_ON_STARTUP is set and no business exists
"""

import logging

from sqlmodel import SQLModel

from business_api.core.setting import settings
from business_api.db import models  # noqa: F401  (registers the tables on SQLModel.metadata)
from business_api.db.seed import seed_if_empty
from business_api.db.session import async_session_maker, engine

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure the root logger once, using LOG_LEVEL."""
    root = logging.getLogger()
    if root.handlers:
        # Already configured (e.g. by uvicorn or the test runner)
        root.setLevel(settings.LOG_LEVEL.upper())
        return

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def initialize_database() -> None:
    """
    Create the schema and load sample data as configured.

    Failures are logged and re-raised: the service cannot run without its store.
    """
    try:
        if settings.CREATE_SCHEMA_ON_STARTUP:
            async with engine.begin() as connection:
                await connection.run_sync(SQLModel.metadata.create_all)
            logger.info("Database schema is up to date")

        if settings.SEED_ON_STARTUP:
            async with async_session_maker() as session:
                inserted = await seed_if_empty(session)
            if inserted:
                logger.info(f"Loaded {inserted} sample businesses")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}", exc_info=True)
        raise


async def shutdown_database() -> None:
    """Dispose of the engine's connections."""
    await engine.dispose()
    logger.info("Database engine disposed")
