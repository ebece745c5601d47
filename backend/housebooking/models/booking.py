"""
Booking of a property for a half-open date range [start_date, end_date).

Key design decisions:
- Dates are stored as calendar dates; time of day never takes part in overlap
- user_id holds the owner's login name, not the opaque user id
- No update path: bookings are created and deleted, never mutated
- Overlap per property is prevented by the service's optimistic lock on
  properties.booking_version, plus an exclusion constraint on PostgreSQL
  (see migration 001)
"""

from sqlalchemy import Column, Integer, String, Date, ForeignKey, CheckConstraint, Index

from housebooking.db.base import Base, TimestampMixin

class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
    user_id = Column(String(256), ForeignKey("users.username"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    expected_people = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint("start_date < end_date", name="check_booking_dates_ordered"),
        CheckConstraint(
            "expected_people >= 1 AND expected_people <= 20",
            name="check_booking_expected_people",
        ),
        # Conflict checks and per-property listings filter on property then date
        Index("ix_bookings_property_start", "property_id", "start_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, property={self.property_id}, "
            f"{self.start_date}..{self.end_date})>"
        )
