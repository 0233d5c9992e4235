"""
Lead model - prospective client tracked through the sales pipeline.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from imobi.models.enums import LeadStatus, PropertyPurpose


class Lead(SQLModel, table=True):
    """
    Lead entity, scoped to an organization.
    `updated_at` is stamped on every status change and drives staleness.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    org_id: uuid.UUID = Field(foreign_key="organization.id", index=True)

    # Basic info
    name: str = Field(index=True)
    email: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = Field(default=None, index=True)

    # Pipeline
    status: LeadStatus = Field(default=LeadStatus.NOVO, index=True)
    source: Optional[str] = None  # site, portal, indicacao, walk-in...
    assigned_to: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")

    # Interest
    interest_type: Optional[PropertyPurpose] = None
    property_type_id: Optional[uuid.UUID] = Field(default=None, foreign_key="property_type.id")
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    preferred_neighborhoods: Optional[str] = None

    notes: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
