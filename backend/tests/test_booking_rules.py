"""
Unit tests for the booking rules: overlap, pricing, validation, date handling.
"""

from datetime import date

import pytest

from housebooking.core.exceptions import InvalidInput
from housebooking.schemas.booking import BookingCreate, BookingResponse
from housebooking.services.booking_service import (
    compute_total_price,
    count_nights,
    dates_overlap,
    validate_booking_request,
)

TODAY = date(2025, 5, 1)


def test_back_to_back_stays_do_not_overlap():
    assert not dates_overlap(date(2025, 7, 5), date(2025, 7, 8), date(2025, 7, 1), date(2025, 7, 5))
    assert not dates_overlap(date(2025, 6, 28), date(2025, 7, 1), date(2025, 7, 1), date(2025, 7, 5))


@pytest.mark.parametrize("start,end", [
    (date(2025, 7, 4), date(2025, 7, 6)),   # overlaps the end
    (date(2025, 6, 30), date(2025, 7, 2)),  # overlaps the start
    (date(2025, 7, 2), date(2025, 7, 3)),   # inside
    (date(2025, 6, 1), date(2025, 8, 1)),   # surrounds
])
def test_overlapping_stays(start, end):
    assert dates_overlap(start, end, date(2025, 7, 1), date(2025, 7, 5))


def test_price_is_nights_times_people_times_30():
    nights = count_nights(date(2025, 6, 1), date(2025, 6, 4))
    assert nights == 3
    assert compute_total_price(nights, 4) == 360


def test_start_must_be_before_end():
    with pytest.raises(InvalidInput):
        validate_booking_request(date(2025, 6, 4), date(2025, 6, 4), 2, today=TODAY)
    with pytest.raises(InvalidInput):
        validate_booking_request(date(2025, 6, 5), date(2025, 6, 4), 2, today=TODAY)


def test_start_cannot_be_in_the_past():
    with pytest.raises(InvalidInput, match="past"):
        validate_booking_request(date(2025, 4, 30), date(2025, 5, 3), 2, today=TODAY)
    # Today itself is fine
    validate_booking_request(TODAY, date(2025, 5, 3), 2, today=TODAY)


@pytest.mark.parametrize("people", [0, 21, -1])
def test_people_out_of_range(people):
    with pytest.raises(InvalidInput, match="between 1 and 20"):
        validate_booking_request(date(2025, 6, 1), date(2025, 6, 4), people, today=TODAY)


@pytest.mark.parametrize("people", [1, 20])
def test_people_boundaries_accepted(people):
    validate_booking_request(date(2025, 6, 1), date(2025, 6, 4), people, today=TODAY)


def test_incoming_timestamps_are_normalized_to_utc_dates():
    data = BookingCreate.model_validate({
        "propertyId": 1,
        # 23:30 at UTC-2 is already the next day in UTC
        "startDate": "2025-06-01T23:30:00-02:00",
        "endDate": "2025-06-04T00:00:00Z",
        "expectedPeople": 3,
    })
    assert data.start_date == date(2025, 6, 2)
    assert data.end_date == date(2025, 6, 4)


def test_plain_dates_and_naive_timestamps_accepted():
    data = BookingCreate.model_validate({
        "propertyId": 1,
        "startDate": "2025-06-01",
        "endDate": "2025-06-04T15:00:00",
    })
    assert data.start_date == date(2025, 6, 1)
    assert data.end_date == date(2025, 6, 4)
    assert data.expected_people == 1


def test_dates_serialized_as_utc_midnight():
    response = BookingResponse(
        id=1,
        property_id=1,
        user_id="guest",
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 4),
        expected_people=4,
        nights=3,
        total_price=360,
    )
    data = response.model_dump(by_alias=True, mode="json")
    assert data["startDate"] == "2025-06-01T00:00:00Z"
    assert data["endDate"] == "2025-06-04T00:00:00Z"
    assert data["totalPrice"] == 360
