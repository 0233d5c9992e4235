"""
Leads API routes.
"""
import uuid
from typing import Optional, List
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.database import get_session
from imobi.services.lead_service import LeadService
from imobi.models.enums import LeadStatus, PropertyPurpose
from imobi.schemas.lead import (
    LeadCreate, LeadUpdate, LeadStatusUpdate, LeadResponse, LeadFilter,
    KanbanColumnResponse, StaleLeadResponse, StaleLeadsResponse, StaleCountResponse
)
from imobi.schemas.dashboard import ActivityFeed, ActivityResponse
from imobi.services.activity_service import ActivityService
from imobi.core.pagination import PaginatedResponse
from imobi.api.deps import get_current_user
from imobi.models.user import User

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.post("/", response_model=LeadResponse, status_code=201)
async def create_lead(
    lead_data: LeadCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Create a new lead."""
    lead_service = LeadService(session)
    return await lead_service.create(current_user.org_id, current_user.id, lead_data)


@router.get("/", response_model=PaginatedResponse[LeadResponse])
async def list_leads(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[LeadStatus] = None,
    interest_type: Optional[PropertyPurpose] = None,
    assigned_to: Optional[uuid.UUID] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List leads with filtering and pagination."""
    filters = LeadFilter(
        status=status,
        interest_type=interest_type,
        assigned_to=assigned_to,
        search=search
    )

    lead_service = LeadService(session)
    result = await lead_service.list(current_user.org_id, filters, page, limit)
    result["items"] = [LeadResponse.model_validate(lead) for lead in result["items"]]
    return result


@router.get("/kanban", response_model=List[KanbanColumnResponse])
async def get_kanban(
    interest_type: Optional[PropertyPurpose] = None,
    assigned_to: Optional[uuid.UUID] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Pipeline board, one column per status."""
    filters = LeadFilter(interest_type=interest_type, assigned_to=assigned_to, search=search)
    lead_service = LeadService(session)
    columns = await lead_service.kanban(current_user.org_id, filters)
    return [
        KanbanColumnResponse(
            status=column.status,
            count=column.count,
            leads=[LeadResponse.model_validate(lead) for lead in column.leads]
        )
        for column in columns
    ]


@router.get("/stale", response_model=StaleLeadsResponse)
async def get_stale_leads(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Leads waiting too long in their column, most urgent first."""
    lead_service = LeadService(session)
    items, alert_count, stale = await lead_service.stale_leads(current_user.org_id)
    return StaleLeadsResponse(
        items=[
            StaleLeadResponse(
                lead=LeadResponse.model_validate(info.lead),
                hours_since_update=info.hours_since_update,
                threshold=info.threshold,
                urgency_level=info.urgency_level
            )
            for info in items
        ],
        total=len(items),
        alert_count=alert_count,
        stale=stale
    )


@router.get("/stale/count", response_model=StaleCountResponse)
async def get_stale_count(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Number of urgent and critical leads (sidebar badge)."""
    lead_service = LeadService(session)
    _, alert_count, stale = await lead_service.stale_leads(current_user.org_id)
    return StaleCountResponse(count=alert_count, stale=stale)


@router.get("/{lead_id}", response_model=LeadResponse)
async def get_lead(
    lead_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get a lead by ID."""
    lead_service = LeadService(session)
    return await lead_service.get(current_user.org_id, lead_id)


@router.patch("/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: uuid.UUID,
    lead_data: LeadUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Update a lead."""
    lead_service = LeadService(session)
    return await lead_service.update(current_user.org_id, current_user.id, lead_id, lead_data)


@router.patch("/{lead_id}/status", response_model=LeadResponse)
async def change_lead_status(
    lead_id: uuid.UUID,
    status_data: LeadStatusUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Move a lead to another kanban column."""
    lead_service = LeadService(session)
    return await lead_service.change_status(
        current_user.org_id, current_user.id, lead_id, status_data.status
    )


@router.delete("/{lead_id}", status_code=204)
async def delete_lead(
    lead_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Delete a lead."""
    lead_service = LeadService(session)
    await lead_service.delete(current_user.org_id, current_user.id, lead_id)


@router.get("/{lead_id}/activity", response_model=ActivityFeed)
async def get_lead_activity(
    lead_id: uuid.UUID,
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """History of a lead (status moves, edits)."""
    await LeadService(session).get(current_user.org_id, lead_id)
    activity_service = ActivityService(session)
    activities = await activity_service.get_by_entity(current_user.org_id, "lead", lead_id, limit)
    return ActivityFeed(
        items=[ActivityResponse.model_validate(a) for a in activities],
        total=len(activities)
    )
