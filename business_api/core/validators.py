"""
Input Validators

This module provides the field validation rules shared by the business
service, the nested-collection create path and the per-child endpoints.
Every validator raises InvalidArgumentError before any database call is made.

Rules:
- Hours: 0 <= dayOfWeek <= 6, 0 <= open/close <= 23, open < close
- Reviews: 0 <= rating <= 5
- Locations / Services / Businesses: non-empty name
"""

from typing import Iterable, Optional

from business_api.core.exceptions import InvalidArgumentError

MIN_DAY_OF_WEEK = 0
MAX_DAY_OF_WEEK = 6
MIN_HOUR = 0
MAX_HOUR = 23
MIN_RATING = 0
MAX_RATING = 5


def is_in_range(value: Optional[float], low: float, high: float) -> bool:
    """Return True when value is present and low <= value <= high."""
    return value is not None and low <= value <= high


def require_name(name: Optional[str], kind: str) -> str:
    """
    Ensure a name attribute was supplied.

    Args:
        name: The supplied name
        kind: Entity label used in the error message (e.g. "Location")

    Returns:
        The name unchanged

    Raises:
        InvalidArgumentError: If the name is missing or blank
    """
    if not name or not name.strip():
        raise InvalidArgumentError(f"{kind} name must be specified")
    return name


def validate_hour_fields(
    day_of_week: Optional[int],
    open_hour: Optional[int],
    close_hour: Optional[int],
) -> None:
    """
    Validate a business Hour.

    Raises:
        InvalidArgumentError: If any value is missing, out of range, or open >= close
    """
    if not is_in_range(day_of_week, MIN_DAY_OF_WEEK, MAX_DAY_OF_WEEK):
        raise InvalidArgumentError(
            "Hour dayOfWeek must be specified: 0 <= dayOfWeek <= 6 "
            "(0 for Sunday, 1 for Monday, 2 for Tuesday, ..., 6 for Saturday)"
        )
    if not is_in_range(open_hour, MIN_HOUR, MAX_HOUR):
        raise InvalidArgumentError(
            "Hour open must be specified: 0 <= open <= 23 (24 hour clock with 0 === midnight)"
        )
    if not is_in_range(close_hour, MIN_HOUR, MAX_HOUR):
        raise InvalidArgumentError(
            "Hour close must be specified: 0 <= close <= 23 (24 hour clock with 0 === midnight)"
        )
    if open_hour >= close_hour:
        raise InvalidArgumentError(
            "Hour open must be < close: (24 hour clock with 0 === midnight)"
        )


def validate_rating(rating: Optional[float]) -> None:
    """Validate a Review rating (0 to 5 inclusive)."""
    if not is_in_range(rating, MIN_RATING, MAX_RATING):
        raise InvalidArgumentError("Review rating must be specified: 0 <= rating <= 5")


def normalize_choice(
    value: Optional[str],
    allowed: Iterable[str],
    default: str,
    field_name: str,
) -> str:
    """
    Normalize a case-insensitive enumerated option.

    Args:
        value: Supplied option, or None/empty to use the default
        allowed: Accepted lower-case options
        default: Option used when value is not supplied
        field_name: Field label used in the error message

    Returns:
        The lower-cased option

    Raises:
        InvalidArgumentError: If value is not one of the allowed options
    """
    if not value:
        return default

    allowed = tuple(allowed)
    normalized = value.lower()
    if normalized not in allowed:
        options = " and ".join(f"'{option}'" for option in allowed)
        raise InvalidArgumentError(
            f"Invalid {field_name} field: only {options} are supported at this time"
        )
    return normalized
