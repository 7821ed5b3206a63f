"""
Business Search Compiler

Translates a sparse search request into one composed SELECT over the
businesses table:

- Text filters: case-insensitive substring match on the business attributes
- Hours filter: EXISTS an hours row for the requested day whose
  open <= hour <= close
- Service / location filters: EXISTS a child row whose name contains the text
- Rating filter: computed avgRating >= rating (businesses without reviews
  have a NULL average and never match)
- Sort by name or avgRating, ascending or descending, capped at the page size

Design Decisions:
- validate_search() does all input checking up front and returns an
  immutable SearchCriteria, so no query is built from invalid input
- Each filter is a pure function (criteria) -> optional predicate; the
  compiler ANDs together whatever the filters return
- avgRating is a correlated scalar subquery, shared with the get-by-id path
"""

from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy import Select, and_, exists, func, select
from sqlalchemy.sql.elements import ColumnElement

from business_api.core.exceptions import InvalidArgumentError
from business_api.core.validators import (
    MAX_DAY_OF_WEEK,
    MAX_HOUR,
    MIN_DAY_OF_WEEK,
    MIN_HOUR,
    normalize_choice,
)
from business_api.db.models import Business, Hour, Location, Review, Service

SORT_FIELDS = ("name", "rating")
SORT_DIRECTIONS = ("asc", "desc")
DEFAULT_SORT_BY = "name"
DEFAULT_SORT_DIRECTION = "asc"

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class SearchCriteria:
    """Validated, normalized search parameters. None means "not filtered"."""
    name: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal: Optional[str] = None
    day_of_week: Optional[int] = None
    hour: Optional[int] = None
    service: Optional[str] = None
    location: Optional[str] = None
    rating: Optional[float] = None
    sort_by: str = DEFAULT_SORT_BY
    sort_direction: str = DEFAULT_SORT_DIRECTION


def validate_search(
    name: Optional[str] = None,
    address_line1: Optional[str] = None,
    address_line2: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    postal: Optional[str] = None,
    day_of_week: Optional[int] = None,
    hour: Optional[int] = None,
    service: Optional[str] = None,
    location: Optional[str] = None,
    rating: Optional[float] = None,
    sort_by: Optional[str] = None,
    sort_direction: Optional[str] = None,
) -> SearchCriteria:
    """
    Validate raw search parameters.

    Returns:
        SearchCriteria with sort options lower-cased and defaulted

    Raises:
        InvalidArgumentError: If dayOfWeek/hour are not supplied together, are out
            of range, or sortBy/sortDirection are unsupported
    """
    if (day_of_week is None) != (hour is None):
        raise InvalidArgumentError(
            "Both the dayOfWeek and hour search parameters must be specified "
            "whenever either of them is specified"
        )
    if day_of_week is not None and not MIN_DAY_OF_WEEK <= day_of_week <= MAX_DAY_OF_WEEK:
        raise InvalidArgumentError("The dayOfWeek is invalid; 0 <= dayOfWeek <= 6 is expected")
    if hour is not None and not MIN_HOUR <= hour <= MAX_HOUR:
        raise InvalidArgumentError("The hour is invalid; 0 <= hour <= 23 is expected")

    return SearchCriteria(
        name=name,
        address_line1=address_line1,
        address_line2=address_line2,
        city=city,
        state=state,
        postal=postal,
        day_of_week=day_of_week,
        hour=hour,
        service=service,
        location=location,
        rating=rating,
        sort_by=normalize_choice(sort_by, SORT_FIELDS, DEFAULT_SORT_BY, "sortBy"),
        sort_direction=normalize_choice(
            sort_direction, SORT_DIRECTIONS, DEFAULT_SORT_DIRECTION, "sortDirection"
        ),
    )


def avg_rating_expression() -> ColumnElement:
    """Correlated subquery: round(avg(rating), 1) of the current business' reviews."""
    return (
        select(func.round(func.avg(Review.rating), 1))
        .where(Review.business_id == Business.id)
        .correlate(Business)
        .scalar_subquery()
    )


def contains_ignore_case(column, text: str) -> ColumnElement:
    """lower(column) LIKE '%text%' with LIKE wildcards in text matched literally."""
    escaped = (
        text.lower()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
    return func.lower(column).like(f"%{escaped}%", escape=LIKE_ESCAPE)


SearchFilter = Callable[[SearchCriteria], Optional[ColumnElement]]


def text_filter(attribute: str, column) -> SearchFilter:
    """Build a filter matching criteria.<attribute> against a businesses column."""
    def apply(criteria: SearchCriteria) -> Optional[ColumnElement]:
        value = getattr(criteria, attribute)
        if not value:
            return None
        return contains_ignore_case(column, value)

    apply.__name__ = f"{attribute}_filter"
    return apply


def hours_filter(criteria: SearchCriteria) -> Optional[ColumnElement]:
    """Business is open on criteria.day_of_week at criteria.hour (bounds inclusive)."""
    if criteria.day_of_week is None or criteria.hour is None:
        return None
    return exists().where(
        Hour.business_id == Business.id,
        Hour.day_of_week == criteria.day_of_week,
        Hour.open <= criteria.hour,
        Hour.close >= criteria.hour,
    )


def service_filter(criteria: SearchCriteria) -> Optional[ColumnElement]:
    if not criteria.service:
        return None
    return exists().where(
        Service.business_id == Business.id,
        contains_ignore_case(Service.name, criteria.service),
    )


def location_filter(criteria: SearchCriteria) -> Optional[ColumnElement]:
    if not criteria.location:
        return None
    return exists().where(
        Location.business_id == Business.id,
        contains_ignore_case(Location.name, criteria.location),
    )


def rating_filter(criteria: SearchCriteria) -> Optional[ColumnElement]:
    # NULL (no reviews) >= x is never true
    if criteria.rating is None:
        return None
    return avg_rating_expression() >= criteria.rating


SEARCH_FILTERS: tuple[SearchFilter, ...] = (
    text_filter("name", Business.name),
    text_filter("address_line1", Business.address_line1),
    text_filter("address_line2", Business.address_line2),
    text_filter("city", Business.city),
    text_filter("state", Business.state),
    text_filter("postal", Business.postal),
    hours_filter,
    service_filter,
    location_filter,
    rating_filter,
)


def build_predicates(criteria: SearchCriteria) -> list[ColumnElement]:
    """Collect the predicates of every filter that applies to the criteria."""
    predicates = []
    for search_filter in SEARCH_FILTERS:
        predicate = search_filter(criteria)
        if predicate is not None:
            predicates.append(predicate)
    return predicates


def compile_search(criteria: SearchCriteria, limit: int) -> Select:
    """
    Compose the search query.

    Args:
        criteria: Validated search criteria
        limit: Maximum number of businesses to return

    Returns:
        SELECT yielding (Business, avg_rating) rows in the requested order
    """
    avg_rating = avg_rating_expression().label("avg_rating")

    statement = select(Business, avg_rating)

    predicates = build_predicates(criteria)
    if predicates:
        statement = statement.where(and_(*predicates))

    sort_column = avg_rating if criteria.sort_by == "rating" else Business.name
    ordering = sort_column.desc() if criteria.sort_direction == "desc" else sort_column.asc()
    if criteria.sort_by == "rating":
        # Unreviewed businesses trail in both directions
        ordering = ordering.nulls_last()
    statement = statement.order_by(ordering)

    if criteria.sort_by == "rating":
        # Ties on the average fall back to name order
        statement = statement.order_by(Business.name.asc())

    return statement.limit(limit)
