"""
Aggregate Fetcher

Loads the four child collections of a business (locations, hours, services,
reviews), each with its own deterministic ordering:

- Locations, Services: by name ascending
- Hours: by dayOfWeek ascending
- Reviews: by creation time ascending

An empty collection is returned as None rather than an empty list; the API
omits such collections from the response body.

Note: each collection is a separate query, so under concurrent writes the
four collections are not guaranteed to come from one snapshot.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from business_api.db.models import Hour, Location, Review, Service

# Ordering shared with the per-child list endpoints
COLLECTION_ORDERING = {
    Location: (Location.name,),
    Hour: (Hour.day_of_week,),
    Service: (Service.name,),
    Review: (Review.created_at,),
}


@dataclass
class BusinessChildren:
    """The hydrated child collections of one business; None means "none exist"."""
    locations: Optional[list[Location]] = None
    hours: Optional[list[Hour]] = None
    services: Optional[list[Service]] = None
    reviews: Optional[list[Review]] = None


class AggregateFetcher:
    """Fetches a business' child collections."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_children(self, model, business_id: str) -> Sequence:
        """Return every row of a child table owned by the business, in display order."""
        statement = (
            select(model)
            .where(model.business_id == business_id)
            .order_by(*COLLECTION_ORDERING[model])
        )
        result = await self.session.execute(statement)
        return result.scalars().all()

    async def _fetch_present(self, model, business_id: str) -> Optional[list]:
        items = await self.list_children(model, business_id)
        return list(items) if items else None

    async def get_locations(self, business_id: str) -> Optional[list[Location]]:
        return await self._fetch_present(Location, business_id)

    async def get_hours(self, business_id: str) -> Optional[list[Hour]]:
        return await self._fetch_present(Hour, business_id)

    async def get_services(self, business_id: str) -> Optional[list[Service]]:
        return await self._fetch_present(Service, business_id)

    async def get_reviews(self, business_id: str) -> Optional[list[Review]]:
        return await self._fetch_present(Review, business_id)

    async def fetch(self, business_id: str) -> BusinessChildren:
        """
        Load all four collections for a business.

        Queries run one after another on the request's session (an AsyncSession
        cannot run concurrent statements).
        """
        return BusinessChildren(
            locations=await self.get_locations(business_id),
            hours=await self.get_hours(business_id),
            services=await self.get_services(business_id),
            reviews=await self.get_reviews(business_id),
        )
