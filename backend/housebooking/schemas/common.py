"""
Shared schema pieces: camelCase JSON and UTC-only timestamps.

Every timestamp entering the API is converted to UTC (naive values are taken
as UTC already) and every timestamp leaving it is written as ISO-8601 with a
trailing "Z". Booking dates are date-only: a full timestamp is accepted,
normalized to UTC and truncated to its calendar date, and written back as
midnight UTC.
"""

from datetime import date, datetime, time, timezone
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def _parse_utc_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if isinstance(value, datetime):
        return as_utc(value)
    return value


def _parse_utc_date(value: Any) -> Any:
    value = _parse_utc_datetime(value)
    if isinstance(value, datetime):
        return value.date()
    return value


def _format_utc_datetime(value: datetime) -> str:
    return as_utc(value).isoformat().replace("+00:00", "Z")


def _format_utc_date(value: date) -> str:
    return _format_utc_datetime(datetime.combine(value, time.min, tzinfo=timezone.utc))


UtcDateTime = Annotated[
    datetime,
    BeforeValidator(_parse_utc_datetime),
    PlainSerializer(_format_utc_datetime, return_type=str, when_used="json"),
]

UtcDate = Annotated[
    date,
    BeforeValidator(_parse_utc_date),
    PlainSerializer(_format_utc_date, return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str
