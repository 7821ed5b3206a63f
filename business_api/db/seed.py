"""
Sample Data

Three sample businesses with services, hours, locations and reviews.
Loaded at startup when SEED_ON_STARTUP is set and the directory is empty,
and used by the test suite as its known starting point.

Resulting average ratings: #1 -> 4.2, #2 -> 3.7, #3 -> 5.0
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from business_api.db.models import Business, Hour, Location, Review, Service

logger = logging.getLogger(__name__)

SAMPLE_BUSINESSES = [
    {
        "name": "Sample Business #1",
        "address_line1": "1234 Fake St",
        "address_line2": "Suite 500",
        "city": "Denver",
        "state": "CO",
        "postal": "80210",
        "services": ["Maid Services", "House Cleaning", "Moving Services"],
        "hours": [(1, 9, 17), (2, 9, 17), (3, 9, 17), (4, 9, 17), (5, 9, 17)],
        "locations": ["Denver", "Lakewood", "Thorton", "Golden", "Arvada", "Centennial", "Parker"],
        "reviews": [
            (4.5, "Use them weekly to clean our home. Do a great job every time"),
            (4, "Helped us move homes, very timely"),
            (4, "On time, did a good job"),
        ],
    },
    {
        "name": "Sample Business #2",
        "address_line1": "1234 Foobar St",
        "address_line2": "Suite 500",
        "city": "Denver",
        "state": "CO",
        "postal": "80201",
        "services": ["Maid Services", "House Cleaning", "Moving Services", "Packing"],
        "hours": [(1, 10, 19), (2, 9, 19), (3, 10, 19), (4, 9, 19), (5, 10, 19), (6, 9, 12)],
        "locations": ["Denver", "Thorton", "Golden", "Arvada", "Centennial", "Parker"],
        "reviews": [
            (4, "Move out cleaning"),
            (2, "Broke our dishes because they didn't pack right"),
            (5, None),
        ],
    },
    {
        "name": "Sample Business #3",
        "address_line1": "23456 5th Ave",
        "address_line2": "Suite A",
        "city": "Henderson",
        "state": "CO",
        "postal": "80640",
        "services": ["Packing", "Moving Services"],
        "hours": [(1, 8, 18), (2, 8, 18), (3, 8, 18), (4, 8, 18), (5, 8, 18), (6, 8, 18)],
        "locations": ["Denver", "Commerce City", "Thorton", "Henderson", "Northglenn"],
        "reviews": [
            (5, "Helped us move across the country, they're great"),
        ],
    },
]


def build_sample_rows(sample: dict) -> list:
    """Build the business row followed by all of its child rows."""
    business = Business(
        name=sample["name"],
        address_line1=sample["address_line1"],
        address_line2=sample["address_line2"],
        city=sample["city"],
        state=sample["state"],
        postal=sample["postal"],
    )
    rows: list = [business]
    rows += [Service(business_id=business.id, name=name) for name in sample["services"]]
    rows += [
        Hour(business_id=business.id, day_of_week=day, open=open_hour, close=close_hour)
        for day, open_hour, close_hour in sample["hours"]
    ]
    rows += [Location(business_id=business.id, name=name) for name in sample["locations"]]
    rows += [
        Review(business_id=business.id, rating=rating, comment=comment)
        for rating, comment in sample["reviews"]
    ]
    return rows


async def seed_sample_data(session: AsyncSession) -> int:
    """
    Insert the sample businesses and commit.

    Returns:
        Number of businesses inserted
    """
    for sample in SAMPLE_BUSINESSES:
        business, *children = build_sample_rows(sample)
        session.add(business)
        await session.flush()
        session.add_all(children)
        await session.flush()

    await session.commit()
    logger.info(f"Seeded {len(SAMPLE_BUSINESSES)} sample businesses")
    return len(SAMPLE_BUSINESSES)


async def seed_if_empty(session: AsyncSession) -> int:
    """Seed only when no business exists yet. Returns the number inserted."""
    result = await session.execute(select(func.count()).select_from(Business))
    if result.scalar_one() > 0:
        return 0
    return await seed_sample_data(session)
