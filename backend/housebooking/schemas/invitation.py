from typing import Optional

from housebooking.schemas.common import CamelModel, UtcDateTime


class InvitationCodeResponse(CamelModel):
    id: int
    code: str
    created_date: UtcDateTime
    expiry_date: UtcDateTime
    is_used: bool
    used_date: Optional[UtcDateTime] = None
    used_by_user_id: Optional[str] = None
    created_by_user_id: Optional[str] = None
