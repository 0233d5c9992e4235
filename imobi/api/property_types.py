"""
Property type catalogue routes.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.database import get_session
from imobi.services.property_service import PropertyService
from imobi.schemas.property import PropertyTypeCreate, PropertyTypeResponse
from imobi.api.deps import get_current_user
from imobi.models.user import User

router = APIRouter(prefix="/api/property-types", tags=["properties"])


@router.get("/", response_model=List[PropertyTypeResponse])
async def list_property_types(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """All property types ordered by name."""
    property_service = PropertyService(session)
    return await property_service.list_types()


@router.post("/", response_model=PropertyTypeResponse, status_code=201)
async def create_property_type(
    type_data: PropertyTypeCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    property_service = PropertyService(session)
    return await property_service.create_type(type_data)
