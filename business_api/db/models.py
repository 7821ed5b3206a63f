"""
Database Models for the Business Directory Service

This module defines the SQLModel database schemas for:
- Business: The directory entry itself (name and address)
- Location: Named service areas of a business
- Hour: One open/close interval per day of week
- Service: Named services a business offers
- Review: Ratings (0-5) with an optional comment

Design Decisions:
- Ids are random UUID4 strings generated server-side
- Every child references businesses.id with ON DELETE CASCADE, so deleting a
  business removes its children in the database itself
- Timestamps are stamped in Python at construction so rows inserted in one
  transaction keep their insertion order (reviews are listed by created_at)
- avgRating is never stored; it is computed per query (see search_compiler)
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)


def generate_id() -> str:
    """Return a new random identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def business_fk_column() -> Column:
    """Owning-business reference shared by every child table."""
    return Column(
        String(36),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class Business(SQLModel, table=True):
    """
    Main directory table.

    Indexes:
    - name: Unique (names are globally unique)
    """
    __tablename__ = "businesses"

    id: str = Field(
        default_factory=generate_id,
        sa_column=Column(String(36), primary_key=True)
    )
    name: str = Field(sa_column=Column(String(255), nullable=False, unique=True, index=True))
    address_line1: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    address_line2: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    city: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    state: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    postal: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class Location(SQLModel, table=True):
    """A named area served by a business. Unique per (business, name)."""
    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("business_id", "name", name="uq_locations_business_id_name"),
    )

    id: str = Field(
        default_factory=generate_id,
        sa_column=Column(String(36), primary_key=True)
    )
    business_id: str = Field(sa_column=business_fk_column())
    name: str = Field(sa_column=Column(String(255), nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class Hour(SQLModel, table=True):
    """
    Opening hours for one day of the week.

    Fields:
    - day_of_week: 0 (Sunday) to 6 (Saturday)
    - open / close: 24 hour clock, 0 == midnight, open < close

    At most one interval per day per business.
    """
    __tablename__ = "hours"
    __table_args__ = (
        UniqueConstraint("business_id", "day_of_week", name="uq_hours_business_id_day_of_week"),
        CheckConstraint("open < close", name="ck_hours_open_before_close"),
    )

    id: str = Field(
        default_factory=generate_id,
        sa_column=Column(String(36), primary_key=True)
    )
    business_id: str = Field(sa_column=business_fk_column())
    day_of_week: int = Field(sa_column=Column(Integer, nullable=False))
    open: int = Field(sa_column=Column(Integer, nullable=False))
    close: int = Field(sa_column=Column(Integer, nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class Service(SQLModel, table=True):
    """A named service offered by a business. Unique per (business, name)."""
    __tablename__ = "services"
    __table_args__ = (
        UniqueConstraint("business_id", "name", name="uq_services_business_id_name"),
    )

    id: str = Field(
        default_factory=generate_id,
        sa_column=Column(String(36), primary_key=True)
    )
    business_id: str = Field(sa_column=business_fk_column())
    name: str = Field(sa_column=Column(String(255), nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class Review(SQLModel, table=True):
    """A customer review. Rating is 0-5, comment is optional."""
    __tablename__ = "reviews"

    id: str = Field(
        default_factory=generate_id,
        sa_column=Column(String(36), primary_key=True)
    )
    business_id: str = Field(sa_column=business_fk_column())
    rating: float = Field(sa_column=Column(Float, nullable=False))
    comment: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
