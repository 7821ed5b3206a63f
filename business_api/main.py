"""
Business Directory Service

Application assembly:
- Business routes plus one router per child collection
  (locations, hours, services, reviews)
- Error handlers translating service errors into {"error": ...} responses
- Access logging, CORS and per-IP rate limiting
- Database preparation on startup, engine disposal on shutdown

Run locally with:
    uvicorn business_api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from business_api.api import endpoints
from business_api.api.child_endpoints import child_routers
from business_api.api.error_handlers import register_error_handlers
from business_api.core.bootstrap import configure_logging, initialize_database, shutdown_database
from business_api.core.rate_limit import limiter
from business_api.core.setting import settings
from business_api.db.session import get_session
from business_api.middleware.logging import add_logging_middleware

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await initialize_database()
    yield
    await shutdown_database()


app = FastAPI(
    title="Business Directory Service",
    description="CRUD and search API for businesses, their locations, hours, services and reviews",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_error_handlers(app)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Health"])
async def root():
    """Service banner with the API version and docs location."""
    return {
        "message": "Business Directory Service",
        "version": API_VERSION,
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Liveness plus a round trip to the database.

    Returns 503 when the database cannot be reached.
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "unreachable"},
        )
    return {"status": "healthy", "database": "ok"}


app.include_router(endpoints.router, tags=["Businesses"])
for child_router in child_routers:
    app.include_router(child_router)
