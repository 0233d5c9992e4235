"""
Lead schemas.
"""
import uuid
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, EmailStr, field_validator, model_validator

from imobi.models.enums import LeadStatus, PropertyPurpose
from imobi.pipeline.staleness import UrgencyLevel


class LeadCreate(BaseModel):
    """Create a new lead. New leads always start in `novo`."""
    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    source: Optional[str] = None
    interest_type: Optional[PropertyPurpose] = None
    property_type_id: Optional[uuid.UUID] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    preferred_neighborhoods: Optional[str] = None
    assigned_to: Optional[uuid.UUID] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_budget(self):
        if self.budget_min is not None and self.budget_max is not None \
                and self.budget_min > self.budget_max:
            raise ValueError("budget_min must not exceed budget_max")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Maria Souza",
                "email": "maria@example.com",
                "phone": "+55 11 99999-0000",
                "interest_type": "locacao",
                "budget_min": 2000,
                "budget_max": 3500,
                "preferred_neighborhoods": "Pinheiros, Vila Madalena"
            }
        }


class LeadUpdate(BaseModel):
    """Update an existing lead."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    status: Optional[LeadStatus] = None
    source: Optional[str] = None
    interest_type: Optional[PropertyPurpose] = None
    property_type_id: Optional[uuid.UUID] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    preferred_neighborhoods: Optional[str] = None
    assigned_to: Optional[uuid.UUID] = None
    notes: Optional[str] = None

    @field_validator("name", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value

    @model_validator(mode="after")
    def check_budget(self):
        if self.budget_min is not None and self.budget_max is not None \
                and self.budget_min > self.budget_max:
            raise ValueError("budget_min must not exceed budget_max")
        return self


class LeadStatusUpdate(BaseModel):
    """Kanban move. Validated against the pipeline by the service."""
    status: str


class LeadResponse(BaseModel):
    """Lead response."""
    id: uuid.UUID
    org_id: uuid.UUID
    name: str
    email: Optional[str]
    phone: Optional[str]
    status: LeadStatus
    source: Optional[str]
    interest_type: Optional[PropertyPurpose]
    property_type_id: Optional[uuid.UUID]
    budget_min: Optional[float]
    budget_max: Optional[float]
    preferred_neighborhoods: Optional[str]
    assigned_to: Optional[uuid.UUID]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LeadFilter(BaseModel):
    """Lead filtering options."""
    status: Optional[LeadStatus] = None
    interest_type: Optional[PropertyPurpose] = None
    assigned_to: Optional[uuid.UUID] = None
    search: Optional[str] = None  # Search in name, email, phone
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None


class KanbanColumnResponse(BaseModel):
    status: LeadStatus
    count: int
    leads: List[LeadResponse]

    class Config:
        from_attributes = True


class StaleLeadResponse(BaseModel):
    lead: LeadResponse
    hours_since_update: Optional[int]
    threshold: Optional[float]
    urgency_level: UrgencyLevel

    class Config:
        from_attributes = True


class StaleLeadsResponse(BaseModel):
    items: List[StaleLeadResponse]
    total: int
    alert_count: int
    stale: bool = False


class StaleCountResponse(BaseModel):
    count: int
    stale: bool = False
