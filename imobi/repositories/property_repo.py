"""
Property, property type and photo repositories.
"""
import uuid
from typing import Optional, List

from sqlmodel import select, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func

from imobi.models.property import Property, PropertyType, PropertyPhoto
from imobi.models.enums import PropertyStatus
from imobi.repositories.base import BaseRepository, data_access
from imobi.schemas.property import PropertyFilter
from imobi.core.pagination import create_paginated_response


class PropertyTypeRepository(BaseRepository[PropertyType]):
    """Repository for the property type catalogue."""

    def __init__(self, session: AsyncSession):
        super().__init__(PropertyType, session)

    @data_access
    async def all(self) -> List[PropertyType]:
        result = await self.session.exec(select(PropertyType).order_by(PropertyType.name))
        return list(result.all())


class PropertyRepository(BaseRepository[Property]):
    """Repository for Property operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Property, session)

    @data_access
    async def search(
        self,
        org_id: uuid.UUID,
        filters: Optional[PropertyFilter] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        """Search properties with filtering, newest first."""
        query = select(Property).where(Property.org_id == org_id)

        if filters:
            if filters.property_type_id:
                query = query.where(Property.property_type_id == filters.property_type_id)
            if filters.purpose:
                query = query.where(Property.purpose == filters.purpose)
            if filters.status:
                query = query.where(Property.status == filters.status)
            if filters.search:
                search_term = f"%{filters.search}%"
                query = query.where(
                    or_(
                        Property.title.ilike(search_term),
                        Property.code.ilike(search_term),
                        Property.address.ilike(search_term)
                    )
                )

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.session.exec(count_query)
        total = total_result.one()

        query = query.order_by(Property.created_at.desc())
        offset = (page - 1) * limit
        query = query.offset(offset).limit(limit)

        result = await self.session.exec(query)
        items = result.all()

        return create_paginated_response(items, total, page, limit)

    async def count_available(self, org_id: uuid.UUID) -> int:
        """Properties currently on the market."""
        return await self.count(org_id, {"status": PropertyStatus.DISPONIVEL})


class PropertyPhotoRepository(BaseRepository[PropertyPhoto]):
    """Repository for property photos."""

    def __init__(self, session: AsyncSession):
        super().__init__(PropertyPhoto, session)

    async def _photos(self, property_id: uuid.UUID) -> List[PropertyPhoto]:
        query = select(PropertyPhoto).where(
            PropertyPhoto.property_id == property_id
        ).order_by(PropertyPhoto.order_index.asc(), PropertyPhoto.created_at.asc())
        result = await self.session.exec(query)
        return list(result.all())

    async def _unset_covers(self, property_id: uuid.UUID, keep: Optional[uuid.UUID] = None):
        for photo in await self._photos(property_id):
            if photo.is_cover and photo.id != keep:
                photo.is_cover = False
                self.session.add(photo)

    @data_access
    async def for_property(self, property_id: uuid.UUID) -> List[PropertyPhoto]:
        """Photos of a property in display order."""
        return await self._photos(property_id)

    @data_access
    async def add(self, property_id: uuid.UUID, data: dict) -> PropertyPhoto:
        """Insert a photo; a new cover replaces the previous one."""
        if data.get("is_cover"):
            await self._unset_covers(property_id)
        photo = PropertyPhoto(property_id=property_id, **data)
        self.session.add(photo)
        await self.session.commit()
        await self.session.refresh(photo)
        return photo

    @data_access
    async def set_cover(self, property_id: uuid.UUID, photo_id: uuid.UUID) -> Optional[PropertyPhoto]:
        """Make one photo the cover, unsetting all others in the same commit."""
        photo = await self.session.get(PropertyPhoto, photo_id)
        if not photo or photo.property_id != property_id:
            return None

        await self._unset_covers(property_id, keep=photo_id)
        photo.is_cover = True
        self.session.add(photo)
        await self.session.commit()
        await self.session.refresh(photo)
        return photo
