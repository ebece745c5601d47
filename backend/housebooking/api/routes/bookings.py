"""
Booking endpoints: listings, conflict-checked creation, deletion.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.db.session import get_db
from housebooking.models.user import User
from housebooking.schemas.booking import (
    BookingCreate,
    BookingDeleteResponse,
    BookingResponse,
    BookingView,
)
from housebooking.services.booking_service import (
    create_booking,
    delete_booking,
    list_bookings,
    to_booking_response,
)
from housebooking.services.cache_service import (
    get_cached_bookings,
    invalidate_booking_cache,
    set_cached_bookings,
)
from housebooking.core.metrics import booking_latency
from housebooking.core.security import get_optional_user
from housebooking.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/Bookings", tags=["Bookings"])


async def _cached_listing(db: AsyncSession, property_id: Optional[int] = None) -> list[BookingView]:
    cached = await get_cached_bookings(property_id)
    if cached is not None:
        logger.info("bookings_list_cache_hit", property_id=property_id)
        return [BookingView.model_validate(item) for item in cached]

    bookings = await list_bookings(db, property_id=property_id)
    await set_cached_bookings(
        [b.model_dump(by_alias=True, mode="json") for b in bookings],
        property_id,
    )
    return bookings


@router.get("", response_model=list[BookingView])
async def list_all_bookings(db: AsyncSession = Depends(get_db)):
    """All bookings with owner names, nights and total price. Cached in Redis."""
    return await _cached_listing(db)


@router.get("/property/{property_id}", response_model=list[BookingView])
async def list_property_bookings(property_id: int, db: AsyncSession = Depends(get_db)):
    """Bookings for one property, ordered by start date. Cached in Redis."""
    return await _cached_listing(db, property_id)


@router.get("/future", response_model=list[BookingView])
async def list_future_bookings(db: AsyncSession = Depends(get_db)):
    """Bookings that have not ended yet, ordered by start date."""
    return await list_bookings(db, future_only=True)


@router.get("/future/property/{property_id}", response_model=list[BookingView])
async def list_future_property_bookings(property_id: int, db: AsyncSession = Depends(get_db)):
    return await list_bookings(db, property_id=property_id, future_only=True)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a property for a date range.

    Administrators may pass `userEmail` to book on behalf of another user.
    Overlapping an existing booking on the same property returns 409 with
    the conflicting bookings.
    """
    with booking_latency.time():
        booking = await create_booking(db, user, booking_data)
    # Invalidate only after commit; a listing in between would re-cache the old rows
    await db.commit()
    await invalidate_booking_cache()
    return to_booking_response(booking)


@router.delete("/{booking_id}", response_model=BookingDeleteResponse)
async def delete_booking_endpoint(
    booking_id: int,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    deleted = await delete_booking(db, user, booking_id)
    await db.commit()
    await invalidate_booking_cache()
    return BookingDeleteResponse(message="Booking deleted successfully", deleted_booking=deleted)
