"""
Lead repository with search and pipeline operations.
"""
import uuid
from typing import Optional, List
from datetime import datetime

from sqlmodel import select, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func

from imobi.models.lead import Lead
from imobi.models.enums import LeadStatus
from imobi.pipeline.staleness import transition_status
from imobi.repositories.base import BaseRepository, data_access
from imobi.schemas.lead import LeadFilter
from imobi.core.pagination import create_paginated_response


class LeadRepository(BaseRepository[Lead]):
    """Repository for Lead operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Lead, session)

    def _filtered(self, org_id: uuid.UUID, filters: Optional[LeadFilter]):
        query = select(Lead).where(Lead.org_id == org_id)

        if filters:
            if filters.status:
                query = query.where(Lead.status == filters.status)
            if filters.interest_type:
                query = query.where(Lead.interest_type == filters.interest_type)
            if filters.assigned_to:
                query = query.where(Lead.assigned_to == filters.assigned_to)
            if filters.created_after:
                query = query.where(Lead.created_at >= filters.created_after)
            if filters.created_before:
                query = query.where(Lead.created_at <= filters.created_before)
            if filters.search:
                search_term = f"%{filters.search}%"
                query = query.where(
                    or_(
                        Lead.name.ilike(search_term),
                        Lead.email.ilike(search_term),
                        Lead.phone.ilike(search_term)
                    )
                )
        return query

    @data_access
    async def search(
        self,
        org_id: uuid.UUID,
        filters: Optional[LeadFilter] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        """Search leads with filtering, newest first."""
        query = self._filtered(org_id, filters)

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.session.exec(count_query)
        total = total_result.one()

        query = query.order_by(Lead.created_at.desc())
        offset = (page - 1) * limit
        query = query.offset(offset).limit(limit)

        result = await self.session.exec(query)
        items = result.all()

        return create_paginated_response(items, total, page, limit)

    @data_access
    async def snapshot(
        self,
        org_id: uuid.UUID,
        filters: Optional[LeadFilter] = None
    ) -> List[Lead]:
        """All matching leads of the organization in a single fetch."""
        query = self._filtered(org_id, filters).order_by(Lead.created_at.desc())
        result = await self.session.exec(query)
        return list(result.all())

    @data_access
    async def open_leads(self, org_id: uuid.UUID) -> List[Lead]:
        """Leads outside terminal statuses, oldest update first."""
        query = select(Lead).where(
            Lead.org_id == org_id,
            Lead.status.not_in([LeadStatus.FECHADO, LeadStatus.PERDIDO])
        ).order_by(Lead.updated_at.asc())
        result = await self.session.exec(query)
        return list(result.all())

    @data_access
    async def created_since(self, org_id: uuid.UUID, since: datetime) -> List[Lead]:
        """Leads created at or after `since` (monthly charts)."""
        query = select(Lead).where(
            Lead.org_id == org_id,
            Lead.created_at >= since
        )
        result = await self.session.exec(query)
        return list(result.all())

    @data_access
    async def update_status(
        self,
        lead_id: uuid.UUID,
        status: LeadStatus,
        now: Optional[datetime] = None
    ) -> Optional[Lead]:
        """Apply a status transition and persist status + updated_at together."""
        lead = await self.session.get(Lead, lead_id)
        if not lead:
            return None

        transition_status(lead, status, now or datetime.utcnow())
        self.session.add(lead)
        await self.session.commit()
        await self.session.refresh(lead)
        return lead
