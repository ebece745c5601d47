from pydantic import Field

from housebooking.schemas.common import CamelModel


class PropertyCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)


class PropertyResponse(CamelModel):
    id: int
    name: str
