"""
Dashboard schemas.
"""
import uuid
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel

from imobi.models.enums import LeadStatus


class DashboardStats(BaseModel):
    """Top-of-dashboard counters."""
    active_properties: int
    total_leads: int  # leads still in the pipeline
    leads_by_status: Dict[LeadStatus, int]
    active_rentals: int
    monthly_revenue: float
    stale: bool = False


class MonthlyLeadStatsResponse(BaseModel):
    month: str
    label: str
    novos: int
    fechados: int
    perdidos: int
    total: int

    class Config:
        from_attributes = True


class MonthlyRevenueResponse(BaseModel):
    month: str
    label: str
    revenue: float

    class Config:
        from_attributes = True


class MonthlyStats(BaseModel):
    leads: List[MonthlyLeadStatsResponse]
    revenue: List[MonthlyRevenueResponse]
    stale: bool = False


class ActivityResponse(BaseModel):
    id: uuid.UUID
    actor_id: Optional[uuid.UUID]
    action: str
    entity_type: str
    entity_id: Optional[uuid.UUID]
    description: Optional[str]
    meta_data: Dict[str, Any]
    created_at: datetime

    class Config:
        from_attributes = True


class ActivityFeed(BaseModel):
    items: List[ActivityResponse]
    total: int
