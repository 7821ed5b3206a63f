"""
Per-Child Services

Uniform list/get/create/update/delete operations for the four collections
owned by a business: locations, hours, services and reviews.

Every operation first checks that the parent business exists
(BusinessNotFoundError otherwise), so children are never created for, or
looked up under, a missing business. Field validation runs before any
database call.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Sequence, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from business_api.api.schemas import HourPayload, LocationPayload, ReviewPayload, ServicePayload
from business_api.core.exceptions import ChildNotFoundError
from business_api.core.validators import require_name, validate_hour_fields, validate_rating
from business_api.db.models import Hour, Location, Review, Service, utc_now
from business_api.services.aggregate_fetcher import AggregateFetcher
from business_api.services.business_service import ensure_business_exists
from business_api.services.unit_of_work import write_transaction

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class BusinessChildService(ABC, Generic[ModelT]):
    """
    CRUD for one kind of business child.

    Subclasses set `model` and `kind` and implement validate(), build() and changes().
    """

    model: ClassVar[type]
    kind: ClassVar[str]

    def __init__(self, session: AsyncSession):
        self.session = session
        self.fetcher = AggregateFetcher(session)

    @abstractmethod
    def validate(self, payload: Any) -> None:
        """Raise InvalidArgumentError for a payload that cannot be stored."""

    @abstractmethod
    def build(self, business_id: str, payload: Any) -> ModelT:
        """Create a new row from a validated payload."""

    @abstractmethod
    def changes(self, payload: Any) -> dict[str, Any]:
        """Column values replaced by an update."""

    async def list_items(self, business_id: str) -> Sequence[ModelT]:
        """Return the business' children in display order (possibly empty)."""
        await ensure_business_exists(self.session, business_id)
        return await self.fetcher.list_children(self.model, business_id)

    async def get_item(self, business_id: str, item_id: str) -> ModelT:
        """
        Raises:
            BusinessNotFoundError: If the business does not exist
            ChildNotFoundError: If the child does not exist under the business
        """
        await ensure_business_exists(self.session, business_id)

        statement = select(self.model).where(
            self.model.id == item_id,
            self.model.business_id == business_id,
        )
        result = await self.session.execute(statement)
        item = result.scalar_one_or_none()

        if item is None:
            raise ChildNotFoundError(self.kind, item_id, business_id)
        return item

    async def create_item(self, business_id: str, payload: Any) -> str:
        """
        Validate and insert a new child.

        Returns:
            The new child id
        """
        self.validate(payload)
        await ensure_business_exists(self.session, business_id)

        item = self.build(business_id, payload)
        async with write_transaction(self.session, f"add {self.kind}"):
            self.session.add(item)
            await self.session.flush()

        logger.info(f"{self.kind.capitalize()} {item.id} added to business {business_id}")
        return item.id

    async def update_item(self, business_id: str, item_id: str, payload: Any) -> None:
        """Replace the mutable attributes of an existing child."""
        self.validate(payload)
        await ensure_business_exists(self.session, business_id)

        statement = (
            update(self.model)
            .where(self.model.id == item_id, self.model.business_id == business_id)
            .values(**self.changes(payload), updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        async with write_transaction(self.session, f"update {self.kind}"):
            result = await self.session.execute(statement)
            if result.rowcount == 0:
                raise ChildNotFoundError(self.kind, item_id, business_id)

        logger.info(f"{self.kind.capitalize()} {item_id} of business {business_id} updated")

    async def delete_item(self, business_id: str, item_id: str) -> None:
        await ensure_business_exists(self.session, business_id)

        statement = (
            delete(self.model)
            .where(self.model.id == item_id, self.model.business_id == business_id)
            .execution_options(synchronize_session=False)
        )
        async with write_transaction(self.session, f"delete {self.kind}"):
            result = await self.session.execute(statement)
            if result.rowcount == 0:
                raise ChildNotFoundError(self.kind, item_id, business_id)

        logger.info(f"{self.kind.capitalize()} {item_id} of business {business_id} deleted")


class LocationService(BusinessChildService[Location]):
    model = Location
    kind = "location"

    def validate(self, payload: LocationPayload) -> None:
        require_name(payload.name, "Location")

    def build(self, business_id: str, payload: LocationPayload) -> Location:
        return Location(business_id=business_id, name=payload.name)

    def changes(self, payload: LocationPayload) -> dict[str, Any]:
        return {"name": payload.name}


class HourService(BusinessChildService[Hour]):
    model = Hour
    kind = "hour"

    def validate(self, payload: HourPayload) -> None:
        validate_hour_fields(payload.day_of_week, payload.open, payload.close)

    def build(self, business_id: str, payload: HourPayload) -> Hour:
        return Hour(
            business_id=business_id,
            day_of_week=payload.day_of_week,
            open=payload.open,
            close=payload.close,
        )

    def changes(self, payload: HourPayload) -> dict[str, Any]:
        return {"day_of_week": payload.day_of_week, "open": payload.open, "close": payload.close}


class ServiceOfferingService(BusinessChildService[Service]):
    """Services offered by a business (the `services` table)."""
    model = Service
    kind = "service"

    def validate(self, payload: ServicePayload) -> None:
        require_name(payload.name, "Service")

    def build(self, business_id: str, payload: ServicePayload) -> Service:
        return Service(business_id=business_id, name=payload.name)

    def changes(self, payload: ServicePayload) -> dict[str, Any]:
        return {"name": payload.name}


class ReviewService(BusinessChildService[Review]):
    model = Review
    kind = "review"

    def validate(self, payload: ReviewPayload) -> None:
        validate_rating(payload.rating)

    def build(self, business_id: str, payload: ReviewPayload) -> Review:
        return Review(business_id=business_id, rating=payload.rating, comment=payload.comment)

    def changes(self, payload: ReviewPayload) -> dict[str, Any]:
        values: dict[str, Any] = {"rating": payload.rating}
        # comment is only replaced when the caller sent it; an explicit null clears it
        if "comment" in payload.model_fields_set:
            values["comment"] = payload.comment
        return values
