"""
Base repository with generic CRUD operations.
"""
import functools
import logging
import uuid
from typing import TypeVar, Generic, Type, Optional, List, Any
from datetime import datetime

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from imobi.core.exceptions import DataAccessError
from imobi.core.pagination import create_paginated_response

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)


def data_access(method):
    """Roll back and re-raise store failures as DataAccessError."""
    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            await self.session.rollback()
            operation = f"{type(self).__name__}.{method.__name__}"
            logger.error("%s failed: %s", operation, e)
            raise DataAccessError(operation, str(e.__class__.__name__)) from e
    return wrapper


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with CRUD operations.
    Inherit and specify the model class.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    def _scoped(self, query, org_id: Optional[uuid.UUID], filters: Optional[dict]):
        # Filter by organization if model has org_id
        if org_id and hasattr(self.model, 'org_id'):
            query = query.where(self.model.org_id == org_id)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    query = query.where(getattr(self.model, field) == value)
        return query

    @data_access
    async def create(self, obj_in: dict) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    @data_access
    async def get(self, id: uuid.UUID) -> Optional[ModelType]:
        """Get a record by ID."""
        return await self.session.get(self.model, id)

    @data_access
    async def get_for_org(self, org_id: uuid.UUID, id: uuid.UUID) -> Optional[ModelType]:
        """Get a record by ID only if it belongs to the organization."""
        db_obj = await self.session.get(self.model, id)
        if db_obj is None or getattr(db_obj, "org_id", org_id) != org_id:
            return None
        return db_obj

    @data_access
    async def list(
        self,
        org_id: Optional[uuid.UUID] = None,
        filters: Optional[dict] = None,
        order_by: str = "created_at",
        order_desc: bool = True
    ) -> List[ModelType]:
        """List all records with optional filters."""
        query = self._scoped(select(self.model), org_id, filters)

        # Apply ordering
        if hasattr(self.model, order_by):
            order_column = getattr(self.model, order_by)
            query = query.order_by(order_column.desc() if order_desc else order_column)

        result = await self.session.exec(query)
        return result.all()

    @data_access
    async def list_paginated(
        self,
        org_id: Optional[uuid.UUID] = None,
        filters: Optional[dict] = None,
        page: int = 1,
        limit: int = 20,
        order_by: str = "created_at",
        order_desc: bool = True
    ) -> dict:
        """List records with pagination."""
        query = self._scoped(select(self.model), org_id, filters)

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.session.exec(count_query)
        total = total_result.one()

        if hasattr(self.model, order_by):
            order_column = getattr(self.model, order_by)
            query = query.order_by(order_column.desc() if order_desc else order_column)

        offset = (page - 1) * limit
        query = query.offset(offset).limit(limit)

        result = await self.session.exec(query)
        items = result.all()

        return create_paginated_response(items, total, page, limit)

    @data_access
    async def update(self, id: uuid.UUID, obj_in: dict) -> Optional[ModelType]:
        """Update a record with the given fields in one commit."""
        db_obj = await self.session.get(self.model, id)
        if not db_obj:
            return None

        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        # Update timestamp unless the caller stamped it
        if hasattr(db_obj, 'updated_at') and 'updated_at' not in obj_in:
            db_obj.updated_at = datetime.utcnow()

        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    @data_access
    async def delete(self, id: uuid.UUID) -> bool:
        """Delete a record."""
        db_obj = await self.session.get(self.model, id)
        if not db_obj:
            return False

        await self.session.delete(db_obj)
        await self.session.commit()
        return True

    @data_access
    async def delete_with(self, id: uuid.UUID, children: List[SQLModel]) -> bool:
        """Delete a record and its dependent rows in a single commit."""
        db_obj = await self.session.get(self.model, id)
        if not db_obj:
            return False

        for child in children:
            await self.session.delete(child)
        # Children go first so the foreign keys hold at flush time
        await self.session.flush()

        await self.session.delete(db_obj)
        await self.session.commit()
        return True

    @data_access
    async def count(self, org_id: Optional[uuid.UUID] = None, filters: Optional[dict] = None) -> int:
        """Count records."""
        query = self._scoped(select(func.count()).select_from(self.model), org_id, filters)
        result = await self.session.exec(query)
        return result.one()
