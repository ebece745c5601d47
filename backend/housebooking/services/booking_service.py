"""
Booking rule engine: validation, overlap detection, pricing.

CONCURRENCY STRATEGY: Optimistic Locking on the Property Row
=============================================================

Problem:
  Two guests ask for overlapping dates on the same house at the same time.
  Both read the existing bookings, both see no overlap, both insert.
  Result: Double booking.

Solution:
  Every property carries a `booking_version` counter.

  1. Read the property and its current booking_version
  2. Load existing bookings for the property and check for overlap
  3. UPDATE properties SET booking_version = booking_version + 1
     WHERE id = :property_id AND booking_version = :version_read_in_step_1
  4. If rows_affected == 0, another booking for this property committed
     in between -> roll back and redo the check from step 1
  5. Insert the booking; the request transaction commits it together with
     the version bump

  The UPDATE takes the row lock, so the second writer waits for the first
  to commit and then finds the version changed. A retry re-reads the
  bookings and reports the overlap as a normal CONFLICT.

  On PostgreSQL an exclusion constraint on (property_id, daterange) is the
  final safety net (migration 001).

Dates are half-open: [start_date, end_date). A stay ending on the 5th does
not overlap one starting on the 5th.
"""

from datetime import date
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.config import get_settings
from housebooking.core.exceptions import Conflict, Forbidden, InvalidInput, NotFound, Unauthenticated
from housebooking.core.logging import get_logger
from housebooking.core.metrics import booking_lock_retries, record_booking_attempt
from housebooking.models.booking import Booking
from housebooking.models.property import Property
from housebooking.models.user import User
from housebooking.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingView,
    ConflictingBooking,
    DeletedBooking,
)
from housebooking.schemas.common import utc_today

logger = get_logger(__name__)
settings = get_settings()

# Uniform price for every property
PRICE_PER_PERSON_PER_NIGHT = 30
MIN_PEOPLE = 1
MAX_PEOPLE = 20
MAX_RETRY_ATTEMPTS = 3


def dates_overlap(start: date, end: date, other_start: date, other_end: date) -> bool:
    return start < other_end and end > other_start


def count_nights(start: date, end: date) -> int:
    return (end - start).days


def compute_total_price(nights: int, expected_people: int) -> int:
    return nights * PRICE_PER_PERSON_PER_NIGHT * expected_people


def validate_booking_request(
    start: date,
    end: date,
    expected_people: int,
    today: Optional[date] = None,
) -> None:
    """Raise InvalidInput for a date range or party size the house does not accept."""
    today = today or utc_today()

    if start >= end:
        raise InvalidInput("End date must be after start date")
    if start < today:
        raise InvalidInput("Start date cannot be in the past")
    if expected_people < MIN_PEOPLE or expected_people > MAX_PEOPLE:
        raise InvalidInput(f"Expected people must be between {MIN_PEOPLE} and {MAX_PEOPLE}")


def to_booking_response(booking: Booking) -> BookingResponse:
    nights = count_nights(booking.start_date, booking.end_date)
    return BookingResponse(
        id=booking.id,
        property_id=booking.property_id,
        user_id=booking.user_id,
        start_date=booking.start_date,
        end_date=booking.end_date,
        expected_people=booking.expected_people,
        nights=nights,
        total_price=compute_total_price(nights, booking.expected_people),
    )


def to_booking_view(
    booking: Booking,
    user: Optional[User],
    property_obj: Optional[Property],
) -> BookingView:
    base = to_booking_response(booking)
    return BookingView(
        **base.model_dump(),
        user_first_name=(user.first_name if user else "") or "",
        user_last_name=(user.last_name if user else "") or "",
        user_full_name=user.full_name if user else booking.user_id,
        user_email=(user.email if user else "") or "",
        property_name=property_obj.name if property_obj else None,
    )


async def _resolve_booking_owner(
    db: AsyncSession,
    actor: Optional[User],
    user_email: Optional[str],
) -> User:
    if actor is None:
        raise Unauthenticated()

    if user_email is None:
        return actor

    if not actor.is_admin:
        logger.warning("booking_on_behalf_forbidden", actor=actor.username, target=user_email)
        raise Forbidden("Only administrators can book on behalf of other users")

    result = await db.execute(select(User).where(User.email == user_email))
    target = result.scalar_one_or_none()
    if target is None:
        raise NotFound(f"No user found with email {user_email}")
    return target


async def find_conflicts(
    db: AsyncSession,
    property_id: int,
    start: date,
    end: date,
) -> list[Booking]:
    result = await db.execute(
        select(Booking)
        .where(
            Booking.property_id == property_id,
            Booking.start_date < end,
            Booking.end_date > start,
        )
        .order_by(Booking.start_date.asc())
    )
    return list(result.scalars().all())


async def _claim_property(db: AsyncSession, property_id: int, version: int) -> bool:
    """Compare-and-set the property's booking_version. False means someone else won."""
    result = await db.execute(
        update(Property)
        .where(Property.id == property_id, Property.booking_version == version)
        .values(booking_version=Property.booking_version + 1)
    )
    return result.rowcount == 1


async def create_booking(
    db: AsyncSession,
    actor: Optional[User],
    data: BookingCreate,
) -> Booking:
    """
    Validate, conflict-check and insert a booking.
    Retries up to MAX_RETRY_ATTEMPTS when a concurrent booking on the same
    property wins the version race.
    """
    owner = await _resolve_booking_owner(db, actor, data.user_email)
    # Captured up front: a retry rollback expires loaded instances
    owner_username = owner.username
    actor_username = actor.username

    for attempt in range(1, MAX_RETRY_ATTEMPTS + 1):
        result = await db.execute(select(Property).where(Property.id == data.property_id))
        property_obj = result.scalar_one_or_none()
        if property_obj is None:
            raise NotFound(f"Property {data.property_id} not found")
        version = property_obj.booking_version

        conflicts = await find_conflicts(db, data.property_id, data.start_date, data.end_date)
        if conflicts:
            record_booking_attempt("conflict")
            logger.warning(
                "booking_conflict",
                property_id=data.property_id,
                start_date=str(data.start_date),
                end_date=str(data.end_date),
                conflicting_ids=[b.id for b in conflicts],
            )
            raise Conflict(
                "The selected dates overlap with an existing booking for this property",
                conflictingBookings=[
                    ConflictingBooking.model_validate(b).model_dump(by_alias=True, mode="json")
                    for b in conflicts
                ],
            )

        try:
            validate_booking_request(data.start_date, data.end_date, data.expected_people)
        except InvalidInput as exc:
            record_booking_attempt("invalid")
            logger.info("booking_rejected", reason=exc.message, property_id=data.property_id)
            raise

        if not await _claim_property(db, data.property_id, version):
            booking_lock_retries.inc()
            logger.info(
                "booking_retry",
                property_id=data.property_id,
                attempt=attempt,
                reason="version_conflict",
            )
            await db.rollback()
            continue

        booking = Booking(
            property_id=data.property_id,
            user_id=owner_username,
            start_date=data.start_date,
            end_date=data.end_date,
            expected_people=data.expected_people,
        )
        db.add(booking)
        await db.flush()
        await db.refresh(booking)

        record_booking_attempt("success")
        logger.info(
            "booking_created",
            booking_id=booking.id,
            property_id=booking.property_id,
            user=owner_username,
            booked_by=actor_username,
            nights=count_nights(booking.start_date, booking.end_date),
            attempt=attempt,
        )
        return booking

    record_booking_attempt("conflict")
    raise Conflict("Booking failed because the property was booked concurrently. Please try again.")


async def list_bookings(
    db: AsyncSession,
    property_id: Optional[int] = None,
    future_only: bool = False,
) -> list[BookingView]:
    """
    Bookings joined with owner and property, ordered by start date.
    Future means checkout lies after today (end_date > today), so a stay
    ending today is no longer listed.
    """
    query = (
        select(Booking, User, Property)
        .outerjoin(User, User.username == Booking.user_id)
        .outerjoin(Property, Property.id == Booking.property_id)
    )
    if property_id is not None:
        query = query.where(Booking.property_id == property_id)
    if future_only:
        query = query.where(Booking.end_date > utc_today())

    result = await db.execute(query.order_by(Booking.start_date.asc(), Booking.id.asc()))
    return [to_booking_view(booking, user, prop) for booking, user, prop in result.all()]


async def delete_booking(
    db: AsyncSession,
    actor: Optional[User],
    booking_id: int,
    require_ownership: Optional[bool] = None,
) -> DeletedBooking:
    """
    Delete a booking and return its summary.
    With ownership enforcement on, only the owner or an admin may delete.
    """
    if require_ownership is None:
        require_ownership = settings.BOOKING_DELETE_REQUIRES_OWNERSHIP
    if require_ownership and actor is None:
        raise Unauthenticated()

    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFound(f"No booking found with ID {booking_id}")

    if require_ownership and not (actor.is_admin or actor.username == booking.user_id):
        logger.warning("booking_delete_forbidden", booking_id=booking_id, actor=actor.username)
        raise Forbidden("You can only delete your own bookings")

    summary = DeletedBooking.model_validate(booking)
    await db.delete(booking)
    await db.flush()

    logger.info(
        "booking_deleted",
        booking_id=booking_id,
        property_id=summary.property_id,
        deleted_by=actor.username if actor else None,
    )
    return summary
