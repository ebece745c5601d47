"""
Property reference data.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.exceptions import Forbidden
from housebooking.core.logging import get_logger
from housebooking.models.property import Property
from housebooking.models.user import User
from housebooking.schemas.property import PropertyCreate

logger = get_logger(__name__)


async def list_properties(db: AsyncSession) -> list[Property]:
    result = await db.execute(select(Property).order_by(Property.id.asc()))
    return list(result.scalars().all())


async def create_property(db: AsyncSession, actor: User, data: PropertyCreate) -> Property:
    if not actor.is_admin:
        raise Forbidden("Only administrators can add properties")

    property_obj = Property(name=data.name)
    db.add(property_obj)
    await db.flush()
    await db.refresh(property_obj)

    logger.info("property_created", property_id=property_obj.id, name=property_obj.name)
    return property_obj
