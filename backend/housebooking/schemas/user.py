"""
Pydantic schemas for registration, login, profile and the user directory.
"""

from typing import Optional

from pydantic import EmailStr

from housebooking.schemas.common import CamelModel, UtcDate


class UserRegister(CamelModel):
    username: Optional[str] = None
    email: EmailStr
    password: str
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    invitation_code: str


class RegisterResponse(CamelModel):
    message: str = "User registered successfully"
    user_id: str


class UserLogin(CamelModel):
    # Username or email
    username: str
    password: str
    remember_me: bool = False


class LoginResponse(CamelModel):
    message: str = "Logged in"
    user_id: str


class ProfileResponse(CamelModel):
    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    phone_number: str
    is_admin: bool


class ProfileUpdate(CamelModel):
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    email: EmailStr


class UserListItem(CamelModel):
    id: str
    username: str
    first_name: str
    last_name: str
    phone_number: str
    email: str
    next_booking_date: Optional[UtcDate] = None
    next_booking_property_name: Optional[str] = None
