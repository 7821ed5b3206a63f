"""
Write Transaction Helper

Every write in the service layer goes through write_transaction(), which
commits on success and rolls back on any storage error, translating
SQLAlchemy failures into the service error taxonomy:

- IntegrityError (unique/check/foreign key violation) -> InvalidArgumentError
- Any other SQLAlchemyError -> StorageFailureError (cause logged, not returned)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from business_api.core.exceptions import InvalidArgumentError, StorageFailureError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def write_transaction(session: AsyncSession, action: str) -> AsyncIterator[AsyncSession]:
    """
    Run a block of writes as a single transaction.

    Args:
        session: The request-scoped database session
        action: Human readable description used in errors and logs (e.g. "add business")

    Yields:
        The same session, for convenience

    Raises:
        InvalidArgumentError: If a database constraint rejects the writes
        StorageFailureError: If the database fails for any other reason
    """
    try:
        yield session
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.warning(f"Constraint violation while trying to {action}: {e.orig}")
        raise InvalidArgumentError(
            f"Unable to {action}: the request conflicts with existing data"
        ) from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error while trying to {action}", exc_info=True)
        raise StorageFailureError(f"Failed to {action}", original_error=e) from e
