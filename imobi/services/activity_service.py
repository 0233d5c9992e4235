"""
Activity service - activity feed.
"""
import uuid
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.repositories.activity_repo import ActivityLogRepository
from imobi.models.activity import ActivityLog


class ActivityService:
    """Service for reading the activity log."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.activity_repo = ActivityLogRepository(session)

    async def get_recent(self, org_id: uuid.UUID, limit: int = 10) -> List[ActivityLog]:
        """Get recent activity for dashboard."""
        return await self.activity_repo.get_recent(org_id, limit)

    async def get_by_entity(
        self,
        org_id: uuid.UUID,
        entity_type: str,
        entity_id: uuid.UUID,
        limit: int = 50
    ) -> List[ActivityLog]:
        """Get activity for a specific entity."""
        return await self.activity_repo.get_by_entity(org_id, entity_type, entity_id, limit)
