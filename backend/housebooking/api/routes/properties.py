from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.security import get_current_user
from housebooking.db.session import get_db
from housebooking.models.user import User
from housebooking.schemas.property import PropertyCreate, PropertyResponse
from housebooking.services.property_service import create_property, list_properties

router = APIRouter(prefix="/Properties", tags=["Properties"])


@router.get("", response_model=list[PropertyResponse])
async def list_properties_endpoint(db: AsyncSession = Depends(get_db)):
    return await list_properties(db)


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property_endpoint(
    property_data: PropertyCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Add a property. Administrators only."""
    return await create_property(db, user, property_data)
