"""
Business Aggregation Service

This service handles the business-level operations:
- Get a single hydrated business (with avgRating and child collections)
- Search businesses via the search compiler, hydrating every match
- Create a business together with nested collections in one transaction
- Partially update the scalar attributes of a business
- Delete a business (children cascade in the database)

Design Decisions:
- avgRating is computed by the same correlated subquery used by search
- Validation of the whole create payload (nested children included) happens
  before anything is written
- Child collections are never modified through this service; they have their
  own per-entity service (child_service.py)
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from business_api.api.schemas import BusinessCreateRequest, BusinessUpdateRequest
from business_api.core.exceptions import BusinessNotFoundError, InvalidArgumentError
from business_api.core.setting import settings
from business_api.core.validators import require_name, validate_hour_fields, validate_rating
from business_api.db.models import Business, Hour, Location, Review, Service, utc_now
from business_api.services.aggregate_fetcher import AggregateFetcher, BusinessChildren
from business_api.services.search_compiler import (
    SearchCriteria,
    avg_rating_expression,
    compile_search,
)
from business_api.services.unit_of_work import write_transaction

logger = logging.getLogger(__name__)

MUTABLE_BUSINESS_FIELDS = ("name", "address_line1", "address_line2", "city", "state", "postal")


@dataclass
class BusinessRecord:
    """A business with its computed average rating and hydrated children."""
    business: Business
    avg_rating: Optional[float] = None
    children: BusinessChildren = field(default_factory=BusinessChildren)


async def business_exists(session: AsyncSession, business_id: str) -> bool:
    statement = select(func.count()).select_from(Business).where(Business.id == business_id)
    result = await session.execute(statement)
    return result.scalar_one() > 0


async def ensure_business_exists(session: AsyncSession, business_id: str) -> None:
    """
    Parent check shared by every business-scoped operation.

    Raises:
        BusinessNotFoundError: If no business has the given id
    """
    if not await business_exists(session, business_id):
        raise BusinessNotFoundError(business_id)


class BusinessService:
    """
    Business-level operations.

    One instance per request; all statements run on the request's session.
    """

    def __init__(self, session: AsyncSession, page_size: Optional[int] = None):
        """
        Args:
            session: Database session
            page_size: Maximum search results (defaults to MAX_BUSINESSES_PER_PAGE)
        """
        self.session = session
        self.page_size = page_size or settings.MAX_BUSINESSES_PER_PAGE
        self.fetcher = AggregateFetcher(session)

    async def _hydrate(self, business: Business, avg_rating: Optional[float]) -> BusinessRecord:
        children = await self.fetcher.fetch(business.id)
        return BusinessRecord(business=business, avg_rating=avg_rating, children=children)

    async def get_business(self, business_id: str) -> BusinessRecord:
        """
        Fetch one business with avgRating and its child collections.

        Raises:
            BusinessNotFoundError: If the business does not exist
        """
        statement = (
            select(Business, avg_rating_expression().label("avg_rating"))
            .where(Business.id == business_id)
        )
        result = await self.session.execute(statement)
        row = result.first()

        if row is None:
            raise BusinessNotFoundError(business_id)

        business, avg_rating = row
        return await self._hydrate(business, avg_rating)

    async def search_businesses(self, criteria: SearchCriteria) -> list[BusinessRecord]:
        """
        Run a validated search and hydrate every match.

        Returns:
            Matching businesses in the requested order, at most page_size of them.
            An empty list is a valid result here; the API turns it into a 404.
        """
        statement = compile_search(criteria, limit=self.page_size)
        result = await self.session.execute(statement)
        rows = result.all()

        logger.debug(f"Business search matched {len(rows)} row(s): {criteria}")

        return [await self._hydrate(business, avg_rating) for business, avg_rating in rows]

    def _build_children(self, business_id: str, payload: BusinessCreateRequest) -> list:
        """Validate the nested collections and build their rows."""
        children = []

        for location in payload.locations or []:
            require_name(location.name, "Location")
            children.append(Location(business_id=business_id, name=location.name))

        for hour in payload.hours or []:
            validate_hour_fields(hour.day_of_week, hour.open, hour.close)
            children.append(
                Hour(
                    business_id=business_id,
                    day_of_week=hour.day_of_week,
                    open=hour.open,
                    close=hour.close,
                )
            )

        for service in payload.services or []:
            require_name(service.name, "Service")
            children.append(Service(business_id=business_id, name=service.name))

        for review in payload.reviews or []:
            validate_rating(review.rating)
            children.append(
                Review(business_id=business_id, rating=review.rating, comment=review.comment)
            )

        return children

    async def create_business(self, payload: BusinessCreateRequest) -> str:
        """
        Create a business and any nested collections atomically.

        Ids are generated for the business and every child; the owning reference
        is stamped on each child. If any insert fails, nothing is persisted.

        Returns:
            The new business id

        Raises:
            InvalidArgumentError: If the name is missing, a nested child is invalid,
                or a uniqueness constraint is violated
            StorageFailureError: If the database fails
        """
        require_name(payload.name, "Business")

        business = Business(
            name=payload.name,
            address_line1=payload.address_line1,
            address_line2=payload.address_line2,
            city=payload.city,
            state=payload.state,
            postal=payload.postal,
        )
        children = self._build_children(business.id, payload)

        async with write_transaction(self.session, "add business"):
            self.session.add(business)
            # Parent row first so the children's foreign keys resolve
            await self.session.flush()
            if children:
                self.session.add_all(children)
                await self.session.flush()

        logger.info(f"Business {business.id} created with {len(children)} nested record(s)")
        return business.id

    async def update_business(self, business_id: str, payload: BusinessUpdateRequest) -> None:
        """
        Update the supplied scalar attributes of a business.

        Attributes that are not supplied (or empty) keep their stored values.

        Raises:
            InvalidArgumentError: If no attribute is supplied
            BusinessNotFoundError: If the business does not exist
        """
        changes = {
            attribute: getattr(payload, attribute)
            for attribute in MUTABLE_BUSINESS_FIELDS
            if getattr(payload, attribute)
        }
        if not changes:
            raise InvalidArgumentError(
                "At least one of Business name and/or address attributes must be specified"
            )
        if "name" in changes:
            require_name(changes["name"], "Business")

        await ensure_business_exists(self.session, business_id)

        changes["updated_at"] = utc_now()
        statement = (
            update(Business)
            .where(Business.id == business_id)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        async with write_transaction(self.session, "update business"):
            await self.session.execute(statement)

        logger.info(f"Business {business_id} updated: {sorted(changes)}")

    async def delete_business(self, business_id: str) -> None:
        """
        Delete a business; its locations, hours, services and reviews cascade.

        Raises:
            BusinessNotFoundError: If the business does not exist
        """
        await ensure_business_exists(self.session, business_id)

        statement = (
            delete(Business)
            .where(Business.id == business_id)
            .execution_options(synchronize_session=False)
        )
        async with write_transaction(self.session, "delete business"):
            await self.session.execute(statement)

        logger.info(f"Business {business_id} deleted")
