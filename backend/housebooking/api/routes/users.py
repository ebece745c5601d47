"""
User endpoints: invitation-gated registration, session login/logout,
profile, directory and invitation codes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.config import get_settings
from housebooking.core.exceptions import Unauthenticated
from housebooking.core.security import (
    create_access_token,
    get_current_user,
    get_optional_user,
    session_lifetime,
)
from housebooking.db.session import get_db
from housebooking.models.user import User
from housebooking.schemas.common import MessageResponse
from housebooking.schemas.invitation import InvitationCodeResponse
from housebooking.schemas.user import (
    LoginResponse,
    ProfileResponse,
    ProfileUpdate,
    RegisterResponse,
    UserListItem,
    UserLogin,
    UserRegister,
)
from housebooking.services.auth_service import authenticate_user, update_profile
from housebooking.services.cache_service import invalidate_booking_cache
from housebooking.services.invitation_service import (
    issue_invitation_code,
    list_invitation_codes,
    register_user,
)
from housebooking.services.user_directory_service import list_users_with_next_booking

router = APIRouter(prefix="/User", tags=["User"])
settings = get_settings()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    """Register a new account with a valid, unused invitation code."""
    user = await register_user(db, user_data)
    return RegisterResponse(user_id=user.id)


@router.post("/login", response_model=LoginResponse)
async def login(login_data: UserLogin, response: Response, db: AsyncSession = Depends(get_db)):
    """Check credentials and set the session cookie."""
    user = await authenticate_user(db, login_data)
    lifetime = session_lifetime(login_data.remember_me)
    token = create_access_token(data={"sub": user.id}, expires_delta=lifetime)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        # Without "remember me" the cookie lives for the browser session only
        max_age=int(lifetime.total_seconds()) if login_data.remember_me else None,
    )
    return LoginResponse(user_id=user.id)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: User = Depends(get_current_user)):
    return user


@router.put("/profile", response_model=ProfileResponse)
async def update_profile_endpoint(
    update_data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await update_profile(db, user, update_data)
    # Booking listings embed owner names and emails
    await db.commit()
    await invalidate_booking_cache()
    return user


@router.get("/all", response_model=list[UserListItem])
async def list_users(
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Every user with the date and house of their next upcoming stay."""
    return await list_users_with_next_booking(db)


@router.post(
    "/invitation-codes",
    response_model=InvitationCodeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invitation_code(
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """Issue a single-use invitation code valid for seven days."""
    if user is None and not settings.ALLOW_ANONYMOUS_INVITATIONS:
        raise Unauthenticated()
    return await issue_invitation_code(db, user)


@router.get("/invitation-codes", response_model=list[InvitationCodeResponse])
async def list_my_invitation_codes(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Codes created by the current user, newest first."""
    return await list_invitation_codes(db, user)
