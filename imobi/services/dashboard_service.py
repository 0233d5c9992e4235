"""
Dashboard service - counters and monthly charts.

Both views are served from `dashboard_views` and rebuilt at most once per
refresh interval unless a write invalidates one of their entities.
"""
import logging
import uuid
from typing import Optional
from datetime import datetime

from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.config import settings
from imobi.core.view_store import ViewKey, dashboard_views
from imobi.dashboard.aggregation import (
    count_by_status, count_open_leads, month_window,
    monthly_lead_stats, monthly_revenue, sum_revenue
)
from imobi.repositories.lead_repo import LeadRepository
from imobi.repositories.property_repo import PropertyRepository
from imobi.repositories.rental_repo import RentalRepository, InstallmentRepository
from imobi.schemas.dashboard import (
    DashboardStats, MonthlyStats, MonthlyLeadStatsResponse, MonthlyRevenueResponse
)

logger = logging.getLogger(__name__)

STATS_ENTITIES = ("leads", "properties", "rentals", "installments")
MONTHLY_ENTITIES = ("leads", "installments")


class DashboardService:
    """Service for dashboard figures."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.lead_repo = LeadRepository(session)
        self.property_repo = PropertyRepository(session)
        self.rental_repo = RentalRepository(session)
        self.installment_repo = InstallmentRepository(session)

    async def _load_stats(self, org_id: uuid.UUID, now: datetime) -> DashboardStats:
        leads = await self.lead_repo.snapshot(org_id)
        month_start, month_end = month_window(now, 1)[0]
        payments = await self.installment_repo.paid_since(org_id, month_start, month_end)

        return DashboardStats(
            active_properties=await self.property_repo.count_available(org_id),
            total_leads=count_open_leads(leads),
            leads_by_status=count_by_status(leads),
            active_rentals=await self.rental_repo.count_active(org_id),
            monthly_revenue=sum_revenue(payments, month_start, month_end)
        )

    async def stats(self, org_id: uuid.UUID, now: Optional[datetime] = None) -> DashboardStats:
        """Counters for the dashboard header."""
        if now is not None:
            return await self._load_stats(org_id, now)

        key = ViewKey(name="dashboard_stats", org_id=org_id, entities=STATS_ENTITIES)
        result = await dashboard_views.get_or_load(
            key, lambda: self._load_stats(org_id, datetime.utcnow())
        )
        return result.data.model_copy(update={"stale": result.stale})

    async def _load_monthly(
        self,
        org_id: uuid.UUID,
        months_back: int,
        reference: datetime
    ) -> MonthlyStats:
        window = month_window(reference, months_back)
        since, until = window[0][0], window[-1][1]

        leads = await self.lead_repo.created_since(org_id, since)
        payments = await self.installment_repo.paid_since(org_id, since, until)

        return MonthlyStats(
            leads=[
                MonthlyLeadStatsResponse.model_validate(m)
                for m in monthly_lead_stats(leads, reference, months_back)
            ],
            revenue=[
                MonthlyRevenueResponse.model_validate(m)
                for m in monthly_revenue(payments, reference, months_back)
            ]
        )

    async def monthly(
        self,
        org_id: uuid.UUID,
        months_back: int = settings.DASHBOARD_MONTHS_BACK,
        reference: Optional[datetime] = None
    ) -> MonthlyStats:
        """Leads and revenue per month for the last `months_back` months."""
        if reference is not None:
            return await self._load_monthly(org_id, months_back, reference)

        key = ViewKey(
            name="dashboard_monthly",
            org_id=org_id,
            entities=MONTHLY_ENTITIES,
            params=(months_back,)
        )
        result = await dashboard_views.get_or_load(
            key, lambda: self._load_monthly(org_id, months_back, datetime.utcnow())
        )
        return result.data.model_copy(update={"stale": result.stale})
