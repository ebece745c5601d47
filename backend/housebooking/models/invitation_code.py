"""
Single-use, time-limited invitation code gating self-registration.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey

from housebooking.db.base import Base


class InvitationCode(Base):
    __tablename__ = "invitation_codes"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, index=True, nullable=False)
    created_date = Column(DateTime(timezone=True), nullable=False)
    expiry_date = Column(DateTime(timezone=True), nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
    used_date = Column(DateTime(timezone=True), nullable=True)
    used_by_user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_by_user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<InvitationCode(code={self.code}, used={self.is_used})>"
