"""
Authentication service handling login and the user's own profile.
Registration lives in invitation_service because it is gated by a code.
"""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.exceptions import InvalidInput, Unauthenticated
from housebooking.core.logging import get_logger
from housebooking.core.security import verify_password
from housebooking.models.user import User
from housebooking.schemas.user import ProfileUpdate, UserLogin

logger = get_logger(__name__)


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> User:
    """
    Check credentials; `login_data.username` may be a username or an email.
    Raises Unauthenticated if they do not match.
    """
    result = await db.execute(
        select(User).where(
            or_(User.username == login_data.username, User.email == login_data.username)
        )
    )
    user = result.scalars().first()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", username=login_data.username)
        raise Unauthenticated("Invalid username or password")

    logger.info("user_logged_in", user_id=user.id, remember_me=login_data.remember_me)
    return user


async def update_profile(db: AsyncSession, user: User, data: ProfileUpdate) -> User:
    """
    Update names, phone and email. The username is left alone even when it
    was defaulted from the old email: bookings reference it, so it stays a
    valid login name next to the new email.
    """
    if data.email != user.email:
        result = await db.execute(
            select(User.id).where(User.email == data.email, User.id != user.id)
        )
        if result.first() is not None:
            raise InvalidInput(f"Email '{data.email}' is already taken")

    user.first_name = data.first_name
    user.last_name = data.last_name
    user.phone_number = data.phone_number
    user.email = str(data.email)
    await db.flush()
    await db.refresh(user)

    logger.info("profile_updated", user_id=user.id)
    return user
