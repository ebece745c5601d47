from housebooking.schemas.user import (
    UserRegister, RegisterResponse, UserLogin, LoginResponse,
    ProfileResponse, ProfileUpdate, UserListItem,
)
from housebooking.schemas.booking import (
    BookingCreate, BookingResponse, BookingView, BookingDeleteResponse,
)
from housebooking.schemas.invitation import InvitationCodeResponse
from housebooking.schemas.property import PropertyCreate, PropertyResponse
from housebooking.schemas.post import PostCreate, PostResponse, PostDeleteResponse

__all__ = [
    "UserRegister", "RegisterResponse", "UserLogin", "LoginResponse",
    "ProfileResponse", "ProfileUpdate", "UserListItem",
    "BookingCreate", "BookingResponse", "BookingView", "BookingDeleteResponse",
    "InvitationCodeResponse",
    "PropertyCreate", "PropertyResponse",
    "PostCreate", "PostResponse", "PostDeleteResponse",
]
