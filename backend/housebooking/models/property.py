"""
Rentable property (reference data, seeded once).

`booking_version` is an optimistic-locking counter: every booking insert for
the property bumps it with a compare-and-set UPDATE, so two concurrent
check-then-insert sequences on the same property cannot both commit.
"""

from sqlalchemy import Column, Integer, String

from housebooking.db.base import Base

class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    booking_version = Column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name})>"
