"""
Property service - listings, property types and photos.
"""
import logging
import uuid
from typing import Optional, List

from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.core import view_store
from imobi.core.exceptions import raise_not_found, raise_already_exists
from imobi.repositories.property_repo import (
    PropertyRepository, PropertyTypeRepository, PropertyPhotoRepository
)
from imobi.repositories.activity_repo import ActivityLogRepository
from imobi.models.property import Property, PropertyType, PropertyPhoto
from imobi.models.activity import Actions
from imobi.schemas.property import (
    PropertyCreate, PropertyUpdate, PropertyFilter, PropertyPhotoCreate, PropertyTypeCreate,
    PropertyDetailResponse, PropertyTypeResponse, PropertyPhotoResponse
)

logger = logging.getLogger(__name__)


class PropertyService:
    """Service for property operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.property_repo = PropertyRepository(session)
        self.type_repo = PropertyTypeRepository(session)
        self.photo_repo = PropertyPhotoRepository(session)
        self.activity_repo = ActivityLogRepository(session)

    # Property types

    async def list_types(self) -> List[PropertyType]:
        return await self.type_repo.all()

    async def create_type(self, data: PropertyTypeCreate) -> PropertyType:
        existing = await self.type_repo.list(filters={"name": data.name}, order_by="name")
        if existing:
            raise_already_exists("Property type", "name", data.name)
        return await self.type_repo.create(data.model_dump())

    # Properties

    async def create(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        property_data: PropertyCreate
    ) -> Property:
        """Create a new listing."""
        data = property_data.model_dump(exclude_none=True)
        data["org_id"] = org_id
        data["created_by"] = user_id

        prop = await self.property_repo.create(data)
        logger.info("Property %s created in org %s", prop.id, org_id)
        view_store.invalidate("properties")

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.PROPERTY_CREATED,
            entity_type="property",
            entity_id=prop.id,
            description=f"Property '{prop.title}' created",
            meta_data={"code": prop.code, "purpose": prop.purpose}
        )
        return prop

    async def get(self, org_id: uuid.UUID, property_id: uuid.UUID) -> Property:
        """Get a property by ID."""
        prop = await self.property_repo.get_for_org(org_id, property_id)
        if not prop:
            raise_not_found("Property", str(property_id))
        return prop

    async def get_detail(self, org_id: uuid.UUID, property_id: uuid.UUID) -> PropertyDetailResponse:
        """Property with its type and ordered photos."""
        prop = await self.get(org_id, property_id)
        property_type = None
        if prop.property_type_id:
            property_type = await self.type_repo.get(prop.property_type_id)
        photos = await self.photo_repo.for_property(property_id)
        return PropertyDetailResponse(
            **prop.model_dump(),
            property_type=PropertyTypeResponse.model_validate(property_type) if property_type else None,
            photos=[PropertyPhotoResponse.model_validate(p) for p in photos]
        )

    async def list(
        self,
        org_id: uuid.UUID,
        filters: Optional[PropertyFilter] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        """List properties with filtering and pagination."""
        return await self.property_repo.search(org_id, filters, page, limit)

    async def update(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        property_id: uuid.UUID,
        property_data: PropertyUpdate
    ) -> Property:
        """Update a listing."""
        await self.get(org_id, property_id)

        update_data = property_data.model_dump(exclude_unset=True)
        prop = await self.property_repo.update(property_id, update_data)
        view_store.invalidate("properties", property_id)

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.PROPERTY_UPDATED,
            entity_type="property",
            entity_id=property_id,
            description=f"Property '{prop.title}' updated",
            meta_data={"changes": list(update_data.keys())}
        )
        return prop

    async def delete(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        property_id: uuid.UUID
    ) -> bool:
        """Delete a listing and its photos."""
        prop = await self.get(org_id, property_id)
        title = prop.title

        photos = await self.photo_repo.for_property(property_id)
        success = await self.property_repo.delete_with(property_id, photos)

        if success:
            view_store.invalidate("properties", property_id)
            await self.activity_repo.log(
                org_id=org_id,
                actor_id=user_id,
                action=Actions.PROPERTY_DELETED,
                entity_type="property",
                entity_id=property_id,
                description=f"Property '{title}' deleted"
            )
        return success

    # Photos

    async def list_photos(self, org_id: uuid.UUID, property_id: uuid.UUID) -> List[PropertyPhoto]:
        await self.get(org_id, property_id)
        return await self.photo_repo.for_property(property_id)

    async def add_photo(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        property_id: uuid.UUID,
        photo_data: PropertyPhotoCreate
    ) -> PropertyPhoto:
        """Attach an already-uploaded photo URL to a property."""
        await self.get(org_id, property_id)
        photo = await self.photo_repo.add(property_id, photo_data.model_dump())
        view_store.invalidate("properties", property_id)

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.PHOTO_ADDED,
            entity_type="property",
            entity_id=property_id,
            meta_data={"photo_id": str(photo.id), "is_cover": photo.is_cover}
        )
        return photo

    async def set_cover(
        self,
        org_id: uuid.UUID,
        property_id: uuid.UUID,
        photo_id: uuid.UUID
    ) -> PropertyPhoto:
        await self.get(org_id, property_id)
        photo = await self.photo_repo.set_cover(property_id, photo_id)
        if not photo:
            raise_not_found("Photo", str(photo_id))
        view_store.invalidate("properties", property_id)
        return photo

    async def delete_photo(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        property_id: uuid.UUID,
        photo_id: uuid.UUID
    ) -> bool:
        await self.get(org_id, property_id)
        photo = await self.photo_repo.get(photo_id)
        if not photo or photo.property_id != property_id:
            raise_not_found("Photo", str(photo_id))

        success = await self.photo_repo.delete(photo_id)
        if success:
            view_store.invalidate("properties", property_id)
            await self.activity_repo.log(
                org_id=org_id,
                actor_id=user_id,
                action=Actions.PHOTO_DELETED,
                entity_type="property",
                entity_id=property_id,
                meta_data={"photo_id": str(photo_id)}
            )
        return success
