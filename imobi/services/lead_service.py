"""
Lead service - lead management and the sales pipeline.
"""
import logging
import uuid
from typing import Optional, List, Tuple
from datetime import datetime

from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.core import view_store
from imobi.core.exceptions import InvalidTransition, raise_not_found, raise_validation_error
from imobi.core.view_store import ViewKey, stale_lead_views
from imobi.repositories.lead_repo import LeadRepository
from imobi.repositories.activity_repo import ActivityLogRepository
from imobi.models.lead import Lead
from imobi.models.enums import LeadStatus
from imobi.models.activity import Actions
from imobi.pipeline.staleness import (
    KanbanColumn, StaleLeadInfo,
    build_kanban, count_alert_leads, list_stale_leads, parse_status
)
from imobi.schemas.lead import LeadCreate, LeadUpdate, LeadFilter

logger = logging.getLogger(__name__)


class LeadService:
    """Service for lead operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.lead_repo = LeadRepository(session)
        self.activity_repo = ActivityLogRepository(session)

    async def create(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        lead_data: LeadCreate
    ) -> Lead:
        """Create a new lead in status `novo`."""
        data = lead_data.model_dump()
        data["org_id"] = org_id
        data["status"] = LeadStatus.NOVO

        lead = await self.lead_repo.create(data)
        logger.info("Lead %s created in org %s", lead.id, org_id)
        view_store.invalidate("leads")

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.LEAD_CREATED,
            entity_type="lead",
            entity_id=lead.id,
            description=f"Lead '{lead.name}' created",
            meta_data={"name": lead.name, "interest_type": lead.interest_type}
        )

        return lead

    async def get(self, org_id: uuid.UUID, lead_id: uuid.UUID) -> Lead:
        """Get a lead by ID."""
        lead = await self.lead_repo.get_for_org(org_id, lead_id)
        if not lead:
            raise_not_found("Lead", str(lead_id))
        return lead

    async def list(
        self,
        org_id: uuid.UUID,
        filters: Optional[LeadFilter] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        """List leads with filtering and pagination."""
        return await self.lead_repo.search(org_id, filters, page, limit)

    async def update(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        lead_id: uuid.UUID,
        lead_data: LeadUpdate
    ) -> Lead:
        """Full-field update of a lead. Always stamps `updated_at`."""
        lead = await self.get(org_id, lead_id)
        old_status = lead.status

        update_data = lead_data.model_dump(exclude_unset=True)
        budget_min = update_data.get("budget_min", lead.budget_min)
        budget_max = update_data.get("budget_max", lead.budget_max)
        if budget_min is not None and budget_max is not None and budget_min > budget_max:
            raise_validation_error("budget_min must not exceed budget_max", "budget_min")

        updated_lead = await self.lead_repo.update(lead_id, update_data)
        view_store.invalidate("leads", lead_id)

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.LEAD_UPDATED,
            entity_type="lead",
            entity_id=lead_id,
            description=f"Lead '{updated_lead.name}' updated",
            meta_data={
                "changes": list(update_data.keys()),
                "old_status": old_status,
                "new_status": updated_lead.status
            }
        )

        return updated_lead

    async def change_status(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        lead_id: uuid.UUID,
        new_status: str,
        now: Optional[datetime] = None
    ) -> Lead:
        """Move a lead to another pipeline column."""
        try:
            status = parse_status(new_status)
        except InvalidTransition as e:
            raise_validation_error(e.message, "status")

        lead = await self.get(org_id, lead_id)
        old_status = lead.status

        updated_lead = await self.lead_repo.update_status(lead_id, status, now or datetime.utcnow())
        logger.info("Lead %s moved %s -> %s", lead_id, old_status.value, status.value)
        view_store.invalidate("leads", lead_id)

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.LEAD_STATUS_CHANGED,
            entity_type="lead",
            entity_id=lead_id,
            description=f"Lead '{updated_lead.name}' moved to {status.value}",
            meta_data={"old_status": old_status, "new_status": status}
        )

        return updated_lead

    async def delete(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        lead_id: uuid.UUID
    ) -> bool:
        """Delete a lead."""
        lead = await self.get(org_id, lead_id)

        lead_name = lead.name
        success = await self.lead_repo.delete(lead_id)

        if success:
            view_store.invalidate("leads", lead_id)
            await self.activity_repo.log(
                org_id=org_id,
                actor_id=user_id,
                action=Actions.LEAD_DELETED,
                entity_type="lead",
                entity_id=lead_id,
                description=f"Lead '{lead_name}' deleted"
            )

        return success

    async def kanban(
        self,
        org_id: uuid.UUID,
        filters: Optional[LeadFilter] = None
    ) -> List[KanbanColumn]:
        """Board with one column per pipeline status."""
        leads = await self.lead_repo.snapshot(org_id, filters)
        return build_kanban(leads)

    async def stale_leads(
        self,
        org_id: uuid.UUID,
        now: Optional[datetime] = None
    ) -> Tuple[List[StaleLeadInfo], int, bool]:
        """
        Leads needing attention, most urgent first.

        Returns the list, the urgent+critical alert count and whether the
        result is a previous snapshot served after a failed refresh.
        """
        async def load():
            leads = await self.lead_repo.open_leads(org_id)
            return list_stale_leads(leads, now or datetime.utcnow())

        if now is not None:
            # Explicit reference time bypasses the shared view
            items = await load()
            return items, count_alert_leads(items), False

        key = ViewKey(name="stale_leads", org_id=org_id, entities=("leads",))
        result = await stale_lead_views.get_or_load(key, load)
        return result.data, count_alert_leads(result.data), result.stale
