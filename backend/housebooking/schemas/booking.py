"""
Pydantic schemas for booking requests and the denormalized booking views.

Range checks (dates, people count) live in the booking service so that they
fail with INVALID_INPUT instead of a schema error.
"""

from typing import Optional

from pydantic import EmailStr

from housebooking.schemas.common import CamelModel, UtcDate


class BookingCreate(CamelModel):
    property_id: int
    start_date: UtcDate
    end_date: UtcDate
    expected_people: int = 1
    user_email: Optional[EmailStr] = None


class BookingResponse(CamelModel):
    id: int
    property_id: int
    user_id: str
    start_date: UtcDate
    end_date: UtcDate
    expected_people: int
    nights: int
    total_price: int


class BookingView(BookingResponse):
    user_first_name: str = ""
    user_last_name: str = ""
    user_full_name: str = ""
    user_email: str = ""
    property_name: Optional[str] = None


class ConflictingBooking(CamelModel):
    id: int
    start_date: UtcDate
    end_date: UtcDate
    user_id: str


class DeletedBooking(CamelModel):
    id: int
    property_id: int
    user_id: str
    start_date: UtcDate
    end_date: UtcDate
    expected_people: int


class BookingDeleteResponse(CamelModel):
    message: str
    deleted_booking: DeletedBooking
