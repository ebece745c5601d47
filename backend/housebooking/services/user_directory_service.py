"""
User directory: every user with their next upcoming stay.

One lookup per user; fine for a family-sized user table, would need a
single grouped query to scale.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.logging import get_logger
from housebooking.models.booking import Booking
from housebooking.models.property import Property
from housebooking.models.user import User
from housebooking.schemas.common import utc_today
from housebooking.schemas.user import UserListItem

logger = get_logger(__name__)


async def list_users_with_next_booking(db: AsyncSession) -> list[UserListItem]:
    today = utc_today()
    users = (await db.execute(select(User).order_by(User.username.asc()))).scalars().all()

    directory = []
    for user in users:
        # Dates are midnight-normalized, so "starts after today" == "starts after now"
        result = await db.execute(
            select(Booking, Property)
            .outerjoin(Property, Property.id == Booking.property_id)
            .where(Booking.user_id == user.username, Booking.start_date > today)
            .order_by(Booking.start_date.asc())
            .limit(1)
        )
        row = result.first()
        next_booking, property_obj = row if row else (None, None)

        directory.append(UserListItem(
            id=user.id,
            username=user.username,
            first_name=user.first_name or "",
            last_name=user.last_name or "",
            phone_number=user.phone_number or "",
            email=user.email or "",
            next_booking_date=next_booking.start_date if next_booking else None,
            next_booking_property_name=property_obj.name if property_obj else None,
        ))

    logger.debug("user_directory_built", users=len(directory))
    return directory
