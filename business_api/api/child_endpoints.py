"""
FastAPI Endpoints for Business Children

Locations, hours, services and reviews share the same five routes under
their parent business, so one router is built per collection:

- GET    /businesses/{business_id}/{collection}            list (ordered)
- GET    /businesses/{business_id}/{collection}/{item_id}  one child
- POST   /businesses/{business_id}/{collection}            add, returns {"id"}
- PUT    /businesses/{business_id}/{collection}/{item_id}  replace attributes
- DELETE /businesses/{business_id}/{collection}/{item_id}  delete

Every route returns 404 when the parent business does not exist.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from business_api.api.schemas import (
    CreatedResponse,
    HourPayload,
    HourRead,
    LocationPayload,
    LocationRead,
    ReviewPayload,
    ReviewRead,
    ServicePayload,
    ServiceRead,
)
from business_api.core.rate_limit import RATE_LIMITS, limiter
from business_api.db.session import get_session
from business_api.services.child_service import (
    BusinessChildService,
    HourService,
    LocationService,
    ReviewService,
    ServiceOfferingService,
)


def named(name: str):
    """
    Give a generated endpoint its own name.

    slowapi keys its limits by module and function name, and FastAPI derives
    operation ids from it, so each collection's endpoints need distinct names.
    """
    def rename(func):
        func.__name__ = name
        func.__qualname__ = name
        return func
    return rename


def build_child_router(
    collection: str,
    service_class: type[BusinessChildService],
    payload_model: type,
    read_model: type,
    tag: str,
) -> APIRouter:
    """
    Build the CRUD router for one child collection.

    Args:
        collection: URL segment (e.g. "locations")
        service_class: Service implementing the operations
        payload_model: Request body model for create/update
        read_model: Response model for a single child
        tag: OpenAPI tag
    """
    router = APIRouter(prefix=f"/businesses/{{business_id}}/{collection}", tags=[tag])
    kind = service_class.kind

    @router.get(
        "",
        response_model=list[read_model],
        summary=f"List the {collection} of a business",
    )
    @limiter.limit(RATE_LIMITS["read"])
    @named(f"list_{collection}")
    async def list_children(
        business_id: str,
        request: Request,
        session: AsyncSession = Depends(get_session)
    ):
        items = await service_class(session).list_items(business_id)
        return [read_model.from_table(item) for item in items]

    @router.get(
        "/{item_id}",
        response_model=read_model,
        summary=f"Get one {kind} of a business",
    )
    @limiter.limit(RATE_LIMITS["read"])
    @named(f"get_{kind}")
    async def get_child(
        business_id: str,
        item_id: str,
        request: Request,
        session: AsyncSession = Depends(get_session)
    ):
        item = await service_class(session).get_item(business_id, item_id)
        return read_model.from_table(item)

    @router.post(
        "",
        response_model=CreatedResponse,
        summary=f"Add a {kind} to a business",
    )
    @limiter.limit(RATE_LIMITS["write"])
    @named(f"create_{kind}")
    async def create_child(
        business_id: str,
        request: Request,
        body: payload_model,
        session: AsyncSession = Depends(get_session)
    ):
        item_id = await service_class(session).create_item(business_id, body)
        return CreatedResponse(id=item_id)

    @router.put(
        "/{item_id}",
        summary=f"Update a {kind} of a business",
    )
    @limiter.limit(RATE_LIMITS["write"])
    @named(f"update_{kind}")
    async def update_child(
        business_id: str,
        item_id: str,
        request: Request,
        body: payload_model,
        session: AsyncSession = Depends(get_session)
    ) -> Response:
        await service_class(session).update_item(business_id, item_id, body)
        return Response(status_code=status.HTTP_200_OK)

    @router.delete(
        "/{item_id}",
        summary=f"Delete a {kind} of a business",
    )
    @limiter.limit(RATE_LIMITS["write"])
    @named(f"delete_{kind}")
    async def delete_child(
        business_id: str,
        item_id: str,
        request: Request,
        session: AsyncSession = Depends(get_session)
    ) -> Response:
        await service_class(session).delete_item(business_id, item_id)
        return Response(status_code=status.HTTP_200_OK)

    return router


locations_router = build_child_router(
    "locations", LocationService, LocationPayload, LocationRead, "Locations"
)
hours_router = build_child_router(
    "hours", HourService, HourPayload, HourRead, "Hours"
)
services_router = build_child_router(
    "services", ServiceOfferingService, ServicePayload, ServiceRead, "Services"
)
reviews_router = build_child_router(
    "reviews", ReviewService, ReviewPayload, ReviewRead, "Reviews"
)

child_routers = (locations_router, hours_router, services_router, reviews_router)
