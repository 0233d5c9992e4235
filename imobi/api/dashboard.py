"""
Dashboard API routes.
"""
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.config import settings
from imobi.database import get_session
from imobi.services.dashboard_service import DashboardService
from imobi.services.activity_service import ActivityService
from imobi.schemas.dashboard import DashboardStats, MonthlyStats, ActivityFeed, ActivityResponse
from imobi.api.deps import get_current_user
from imobi.models.user import User

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get dashboard counters."""
    dashboard_service = DashboardService(session)
    return await dashboard_service.stats(current_user.org_id)


@router.get("/monthly", response_model=MonthlyStats)
async def get_monthly_stats(
    months_back: int = Query(settings.DASHBOARD_MONTHS_BACK, ge=1, le=24),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Leads and revenue per month for the charts."""
    dashboard_service = DashboardService(session)
    return await dashboard_service.monthly(current_user.org_id, months_back)


@router.get("/activity", response_model=ActivityFeed)
async def get_activity(
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get recent activity."""
    activity_service = ActivityService(session)
    activities = await activity_service.get_recent(current_user.org_id, limit)
    return ActivityFeed(
        items=[ActivityResponse.model_validate(a) for a in activities],
        total=len(activities)
    )
