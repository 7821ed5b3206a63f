"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- JSON uses camelCase keys (addressLine1, businessId, dayOfWeek, avgRating);
  Python attributes stay snake_case via field aliases
- Request models are sparse: every field is optional so that range and
  presence checks run in the service layer and report 400 with a message
- Client-supplied ids, timestamps and avgRating are not part of any request
  model and are therefore dropped
- Response collections are Optional: a business without e.g. reviews has no
  "reviews" key at all (endpoints serialize with exclude_unset)
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlmodel import SQLModel


class APIModel(BaseModel):
    """Base model accepting both camelCase aliases and snake_case names."""
    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_table(cls, row: SQLModel) -> "APIModel":
        """Build a response model from a table row."""
        return cls.model_validate(row.model_dump())


# ---------------------------------------------------------------------------
# Child payloads (nested in business creation and used by the child endpoints)
# ---------------------------------------------------------------------------

class LocationPayload(APIModel):
    """Sparse Location: only name is used."""
    name: Optional[str] = Field(None, description="Location name, unique within the business")


class HourPayload(APIModel):
    """Sparse Hour: only dayOfWeek, open and close are used."""
    day_of_week: Optional[int] = Field(
        None, alias="dayOfWeek", description="0 for Sunday, 1 for Monday, ..., 6 for Saturday"
    )
    open: Optional[int] = Field(None, description="Opening hour, 24 hour clock with 0 == midnight")
    close: Optional[int] = Field(None, description="Closing hour, 24 hour clock with 0 == midnight")


class ServicePayload(APIModel):
    """Sparse Service: only name is used."""
    name: Optional[str] = Field(None, description="Service name, unique within the business")


class ReviewPayload(APIModel):
    """Sparse Review: rating and optional comment."""
    rating: Optional[float] = Field(None, description="Review rating score out of 5")
    comment: Optional[str] = Field(None, description="The review comment")


# ---------------------------------------------------------------------------
# Business requests
# ---------------------------------------------------------------------------

class BusinessFields(APIModel):
    """Mutable scalar attributes of a business."""
    name: Optional[str] = Field(None, description="Business name, globally unique")
    address_line1: Optional[str] = Field(None, alias="addressLine1")
    address_line2: Optional[str] = Field(None, alias="addressLine2")
    city: Optional[str] = None
    state: Optional[str] = None
    postal: Optional[str] = None


class BusinessCreateRequest(BusinessFields):
    """A new business with optional nested collections, inserted atomically."""
    locations: Optional[list[LocationPayload]] = None
    hours: Optional[list[HourPayload]] = None
    services: Optional[list[ServicePayload]] = None
    reviews: Optional[list[ReviewPayload]] = None


class BusinessUpdateRequest(BusinessFields):
    """Partial update: at least one attribute must be supplied."""


class BusinessSearchRequest(APIModel):
    """Sparse search object; every supplied filter must match."""
    name: Optional[str] = None
    address_line1: Optional[str] = Field(None, alias="addressLine1")
    address_line2: Optional[str] = Field(None, alias="addressLine2")
    city: Optional[str] = None
    state: Optional[str] = None
    postal: Optional[str] = None
    day_of_week: Optional[int] = Field(
        None, alias="dayOfWeek", description="Requires hour; 0 (Sunday) to 6 (Saturday)"
    )
    hour: Optional[int] = Field(None, description="Requires dayOfWeek; 0 to 23")
    service: Optional[str] = Field(None, description="Case-insensitive partial service name")
    location: Optional[str] = Field(None, description="Case-insensitive partial location name")
    rating: Optional[float] = Field(None, description="Minimum average rating")
    sort_by: Optional[str] = Field(None, alias="sortBy", description="'name' (default) or 'rating'")
    sort_direction: Optional[str] = Field(
        None, alias="sortDirection", description="'asc' (default) or 'desc'"
    )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class CreatedResponse(BaseModel):
    """Response model for every create endpoint."""
    id: str = Field(..., description="Server-generated identifier")


class ChildRead(APIModel):
    id: str
    business_id: str = Field(..., alias="businessId")
    created_at: datetime
    updated_at: datetime


class LocationRead(ChildRead):
    name: str


class HourRead(ChildRead):
    day_of_week: int = Field(..., alias="dayOfWeek")
    open: int
    close: int


class ServiceRead(ChildRead):
    name: str


class ReviewRead(ChildRead):
    rating: float
    comment: Optional[str] = None


class BusinessDetail(APIModel):
    """
    A fully hydrated business.

    avgRating and the four collections are only present when the business
    has reviews / children of that kind.
    """
    id: str
    name: str
    address_line1: Optional[str] = Field(None, alias="addressLine1")
    address_line2: Optional[str] = Field(None, alias="addressLine2")
    city: Optional[str] = None
    state: Optional[str] = None
    postal: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    avg_rating: Optional[float] = Field(None, alias="avgRating")
    locations: Optional[list[LocationRead]] = None
    hours: Optional[list[HourRead]] = None
    services: Optional[list[ServiceRead]] = None
    reviews: Optional[list[ReviewRead]] = None

    @classmethod
    def from_record(cls, record: Any) -> "BusinessDetail":
        """
        Build the response from a BusinessRecord, leaving absent values unset.

        Args:
            record: services.business_service.BusinessRecord
        """
        payload: dict[str, Any] = record.business.model_dump()
        if record.avg_rating is not None:
            payload["avg_rating"] = record.avg_rating

        children = record.children
        collections = (
            ("locations", children.locations, LocationRead),
            ("hours", children.hours, HourRead),
            ("services", children.services, ServiceRead),
            ("reviews", children.reviews, ReviewRead),
        )
        for key, rows, read_model in collections:
            if rows is not None:
                payload[key] = [read_model.from_table(row) for row in rows]

        return cls.model_validate(payload)
