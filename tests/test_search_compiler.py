"""
Tests for the business search compiler.

Input validation and filter composition are checked directly; the composed
queries are then run against the seeded sample businesses.
"""

import pytest

from business_api.core.exceptions import InvalidArgumentError
from business_api.services.business_service import BusinessService
from business_api.services.search_compiler import (
    SearchCriteria,
    build_predicates,
    compile_search,
    contains_ignore_case,
    hours_filter,
    rating_filter,
    service_filter,
    validate_search,
)
from business_api.db.models import Business


class TestSearchValidation:
    """Test validate_search()."""

    def test_defaults(self):
        """An empty search sorts by name ascending and filters nothing."""
        criteria = validate_search()
        assert criteria == SearchCriteria()
        assert criteria.sort_by == "name"
        assert criteria.sort_direction == "asc"

    def test_sort_options_are_case_insensitive(self):
        criteria = validate_search(sort_by="RATING", sort_direction="Desc")
        assert criteria.sort_by == "rating"
        assert criteria.sort_direction == "desc"

    @pytest.mark.parametrize("kwargs", [{"day_of_week": 1}, {"hour": 9}])
    def test_day_and_hour_required_together(self, kwargs):
        with pytest.raises(InvalidArgumentError, match="Both the dayOfWeek and hour"):
            validate_search(**kwargs)

    def test_day_of_week_out_of_range(self):
        with pytest.raises(InvalidArgumentError, match="dayOfWeek is invalid"):
            validate_search(day_of_week=7, hour=9)

    def test_hour_out_of_range(self):
        with pytest.raises(InvalidArgumentError, match="hour is invalid"):
            validate_search(day_of_week=1, hour=24)

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"sort_by": "city"}, "Invalid sortBy field"),
            ({"sort_direction": "up"}, "Invalid sortDirection field"),
        ],
    )
    def test_unsupported_sort_options(self, kwargs, message):
        with pytest.raises(InvalidArgumentError, match=message):
            validate_search(**kwargs)


class TestSearchFilters:
    """Test that each filter only applies when its criteria are present."""

    def test_no_predicates_for_empty_search(self):
        assert build_predicates(SearchCriteria()) == []

    def test_absent_criteria_produce_no_filter(self):
        criteria = SearchCriteria()
        assert hours_filter(criteria) is None
        assert service_filter(criteria) is None
        assert rating_filter(criteria) is None

    def test_every_supplied_criterion_adds_a_predicate(self):
        criteria = validate_search(
            name="sample", city="denver", day_of_week=6, hour=10,
            service="pack", location="arv", rating=3.0,
        )
        assert len(build_predicates(criteria)) == 6

    def test_child_filters_use_exists(self):
        criteria = validate_search(service="clean", location="lake")
        sql = str(compile_search(criteria, limit=25))
        assert sql.count("EXISTS") == 2
        assert "LIMIT" in sql

    def test_like_wildcards_are_escaped(self):
        """User text containing % or _ matches literally."""
        clause = contains_ignore_case(Business.name, "100%_Fun")
        assert clause.right.value == "%100\\%\\_fun%"
        assert "ESCAPE" in str(clause)

    def test_rating_sort_has_name_tiebreak(self):
        criteria = validate_search(sort_by="rating", sort_direction="desc")
        sql = str(compile_search(criteria, limit=25))
        order_by = sql.split("ORDER BY", 1)[1]
        assert "avg_rating DESC NULLS LAST" in order_by
        assert "businesses.name ASC" in order_by


async def search_names(session, **kwargs) -> list[str]:
    records = await BusinessService(session).search_businesses(validate_search(**kwargs))
    return [record.business.name for record in records]


class TestSearchQueries:
    """Run compiled searches against the sample businesses."""

    @pytest.mark.asyncio
    async def test_default_order(self, session):
        assert await search_names(session) == [
            "Sample Business #1",
            "Sample Business #2",
            "Sample Business #3",
        ]

    @pytest.mark.asyncio
    async def test_sort_by_rating(self, session):
        records = await BusinessService(session).search_businesses(
            validate_search(sort_by="rating", sort_direction="desc")
        )
        assert [record.avg_rating for record in records] == [5.0, 4.2, 3.7]

    @pytest.mark.asyncio
    async def test_page_size_caps_results(self, session):
        records = await BusinessService(session, page_size=2).search_businesses(validate_search())
        assert len(records) == 2

    @pytest.mark.asyncio
    async def test_open_hours_bounds_are_inclusive(self, session):
        # Sample Business #2 is open 9-12 on Saturday
        assert "Sample Business #2" in await search_names(session, day_of_week=6, hour=9)
        assert "Sample Business #2" in await search_names(session, day_of_week=6, hour=12)
        assert "Sample Business #2" not in await search_names(session, day_of_week=6, hour=13)

    @pytest.mark.asyncio
    async def test_closed_day_matches_nothing(self, session):
        assert await search_names(session, day_of_week=0, hour=10) == []

    @pytest.mark.asyncio
    async def test_wildcard_text_matches_nothing(self, session):
        assert await search_names(session, name="%") == []

    @pytest.mark.asyncio
    async def test_business_without_reviews_fails_rating_filter(self, session):
        session.add(Business(name="Unreviewed Business"))
        await session.commit()

        names = await search_names(session, rating=0)
        assert "Unreviewed Business" not in names
        assert len(names) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("direction", ["asc", "desc"])
    async def test_unreviewed_businesses_sort_last_by_rating(self, session, direction):
        session.add(Business(name="AAA Unreviewed Business"))
        await session.commit()

        records = await BusinessService(session).search_businesses(
            validate_search(sort_by="rating", sort_direction=direction)
        )
        assert records[-1].business.name == "AAA Unreviewed Business"
        assert records[-1].avg_rating is None
        assert all(record.avg_rating is not None for record in records[:-1])
