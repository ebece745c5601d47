"""
Holiday House Booking API - Main Application Entry Point

Backend for a family holiday-house booking site:
- Date-range bookings with overlap detection, safe under concurrent requests
- Invitation-code gated registration and cookie sessions
- Structured logging with request correlation
- Redis caching of booking listings
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from housebooking.core.config import get_settings
from housebooking.core.exceptions import HouseBookingError
from housebooking.core.logging import setup_logging, get_logger
from housebooking.core.metrics import metrics_endpoint
from housebooking.api.router import api_router
from housebooking.api.middleware import RequestLoggingMiddleware
from housebooking.db.seed import seed_database
from housebooking.db.session import AsyncSessionLocal
from housebooking.services.cache_service import get_redis, close_redis, get_cache_stats

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    if settings.SEED_ON_STARTUP:
        try:
            async with AsyncSessionLocal() as session:
                await seed_database(session)
        except Exception:
            # The API can still serve existing data without seeding
            logger.exception("seeding_failed")

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache")

    yield

    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Holiday house bookings, invitations and user directory",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_origin_regex=r"https?://localhost(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(HouseBookingError)
async def house_booking_error_handler(request: Request, exc: HouseBookingError):
    logger.info("request_rejected", error=exc.error, status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
