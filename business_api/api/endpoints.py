"""
FastAPI Endpoints for Businesses

This module defines the business-level REST API endpoints with minimal logic.
Endpoints only handle:
- Request parsing (Pydantic models)
- Rate limiting
- Delegating to the service layer
- Shaping responses

Errors raised by the services are translated to HTTP responses by the
handlers in error_handlers.py.

Routes:
- GET    /businesses/{business_id}   hydrated business
- POST   /businesses/search          filtered, sorted search (max one page)
- POST   /businesses                 create, optionally with nested collections
- PUT    /businesses/{business_id}   partial update of name/address
- DELETE /businesses/{business_id}   delete (children cascade)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from business_api.api.schemas import (
    BusinessCreateRequest,
    BusinessDetail,
    BusinessSearchRequest,
    BusinessUpdateRequest,
    CreatedResponse,
)
from business_api.core.exceptions import NoSearchResultsError
from business_api.core.rate_limit import RATE_LIMITS, limiter
from business_api.db.session import get_session
from business_api.services.business_service import BusinessService
from business_api.services.search_compiler import validate_search

router = APIRouter(prefix="/businesses")


@router.post(
    "/search",
    response_model=list[BusinessDetail],
    response_model_exclude_unset=True,
    summary="Search businesses",
    description=(
        "Filters businesses by name/address text, open hours, services, locations and "
        "minimum average rating. Returns 404 when nothing matches."
    ),
)
@limiter.limit(RATE_LIMITS["search"])
async def search_businesses(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: Optional[BusinessSearchRequest] = None,
    session: AsyncSession = Depends(get_session)
) -> list[BusinessDetail]:
    """
    Search for businesses.

    Raises:
        InvalidArgumentError (400): dayOfWeek/hour or sort options are invalid
        NoSearchResultsError (404): nothing matched the criteria
    """
    criteria = validate_search(**(body or BusinessSearchRequest()).model_dump())

    records = await BusinessService(session).search_businesses(criteria)
    if not records:
        raise NoSearchResultsError()

    return [BusinessDetail.from_record(record) for record in records]


@router.get(
    "/{business_id}",
    response_model=BusinessDetail,
    response_model_exclude_unset=True,
    summary="Get a business",
    description="Returns the business with its avgRating, locations, hours, services and reviews",
)
@limiter.limit(RATE_LIMITS["read"])
async def get_business(
    business_id: str,
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> BusinessDetail:
    record = await BusinessService(session).get_business(business_id)
    return BusinessDetail.from_record(record)


@router.post(
    "",
    response_model=CreatedResponse,
    status_code=status.HTTP_200_OK,
    summary="Add a business",
    description=(
        "Creates a business, optionally with nested locations, hours, services and reviews. "
        "Everything is inserted in one transaction; any client-supplied ids are ignored."
    ),
)
@limiter.limit(RATE_LIMITS["write"])
async def create_business(
    request: Request,
    body: BusinessCreateRequest,
    session: AsyncSession = Depends(get_session)
) -> CreatedResponse:
    business_id = await BusinessService(session).create_business(body)
    return CreatedResponse(id=business_id)


@router.put(
    "/{business_id}",
    summary="Update a business",
    description="Updates the supplied name/address attributes; nested collections are not modified",
)
@limiter.limit(RATE_LIMITS["write"])
async def update_business(
    business_id: str,
    request: Request,
    body: BusinessUpdateRequest,
    session: AsyncSession = Depends(get_session)
) -> Response:
    await BusinessService(session).update_business(business_id, body)
    return Response(status_code=status.HTTP_200_OK)


@router.delete(
    "/{business_id}",
    summary="Delete a business",
    description="Deletes the business together with all of its locations, hours, services and reviews",
)
@limiter.limit(RATE_LIMITS["write"])
async def delete_business(
    business_id: str,
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> Response:
    await BusinessService(session).delete_business(business_id)
    return Response(status_code=status.HTTP_200_OK)
