"""
Properties API routes.
"""
import uuid
from typing import Optional, List
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.database import get_session
from imobi.services.property_service import PropertyService
from imobi.models.enums import PropertyPurpose, PropertyStatus
from imobi.schemas.property import (
    PropertyCreate, PropertyUpdate, PropertyResponse, PropertyDetailResponse,
    PropertyFilter, PropertyPhotoCreate, PropertyPhotoResponse
)
from imobi.core.pagination import PaginatedResponse
from imobi.api.deps import get_current_user
from imobi.models.user import User

router = APIRouter(prefix="/api/properties", tags=["properties"])


@router.post("/", response_model=PropertyResponse, status_code=201)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Create a new listing."""
    property_service = PropertyService(session)
    return await property_service.create(current_user.org_id, current_user.id, property_data)


@router.get("/", response_model=PaginatedResponse[PropertyResponse])
async def list_properties(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    property_type_id: Optional[uuid.UUID] = None,
    purpose: Optional[PropertyPurpose] = None,
    status: Optional[PropertyStatus] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List properties with filtering and pagination."""
    filters = PropertyFilter(
        property_type_id=property_type_id,
        purpose=purpose,
        status=status,
        search=search
    )

    property_service = PropertyService(session)
    result = await property_service.list(current_user.org_id, filters, page, limit)
    result["items"] = [PropertyResponse.model_validate(p) for p in result["items"]]
    return result


@router.get("/{property_id}", response_model=PropertyDetailResponse)
async def get_property(
    property_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get a property with its type and photos."""
    property_service = PropertyService(session)
    return await property_service.get_detail(current_user.org_id, property_id)


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: uuid.UUID,
    property_data: PropertyUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Update a listing."""
    property_service = PropertyService(session)
    return await property_service.update(
        current_user.org_id, current_user.id, property_id, property_data
    )


@router.delete("/{property_id}", status_code=204)
async def delete_property(
    property_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Delete a listing."""
    property_service = PropertyService(session)
    await property_service.delete(current_user.org_id, current_user.id, property_id)


# Photos

@router.get("/{property_id}/photos", response_model=List[PropertyPhotoResponse])
async def list_photos(
    property_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    property_service = PropertyService(session)
    return await property_service.list_photos(current_user.org_id, property_id)


@router.post("/{property_id}/photos", response_model=PropertyPhotoResponse, status_code=201)
async def add_photo(
    property_id: uuid.UUID,
    photo_data: PropertyPhotoCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Attach a photo URL to a listing."""
    property_service = PropertyService(session)
    return await property_service.add_photo(
        current_user.org_id, current_user.id, property_id, photo_data
    )


@router.post("/{property_id}/photos/{photo_id}/cover", response_model=PropertyPhotoResponse)
async def set_cover_photo(
    property_id: uuid.UUID,
    photo_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Make a photo the listing cover."""
    property_service = PropertyService(session)
    return await property_service.set_cover(current_user.org_id, property_id, photo_id)


@router.delete("/{property_id}/photos/{photo_id}", status_code=204)
async def delete_photo(
    property_id: uuid.UUID,
    photo_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    property_service = PropertyService(session)
    await property_service.delete_photo(
        current_user.org_id, current_user.id, property_id, photo_id
    )
