"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from housebooking.api.routes import bookings, posts, properties, users

api_router = APIRouter(prefix="/api")
api_router.include_router(bookings.router)
api_router.include_router(users.router)
api_router.include_router(properties.router)
api_router.include_router(posts.router)
