"""
Activity log model - audit trail for back-office actions.
Feeds the dashboard activity feed.
"""
import uuid
from datetime import datetime
from typing import Optional, Dict, Any

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON


class ActivityLog(SQLModel, table=True):
    """
    Activity log for tracking significant actions.
    """
    __tablename__ = "activity_log"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    org_id: uuid.UUID = Field(foreign_key="organization.id", index=True)
    actor_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id", index=True)

    # Action details
    action: str = Field(index=True)
    entity_type: str = Field(index=True)  # lead, property, rental, installment, user
    entity_id: Optional[uuid.UUID] = None

    # Human-readable description
    description: Optional[str] = None

    # Additional metadata
    meta_data: Dict[str, Any] = Field(default={}, sa_column=Column(JSON))
    # Example: {"old_status": "novo", "new_status": "em_atendimento"}

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)


# Action constants for consistency
class Actions:
    # Lead actions
    LEAD_CREATED = "lead_created"
    LEAD_UPDATED = "lead_updated"
    LEAD_STATUS_CHANGED = "lead_status_changed"
    LEAD_DELETED = "lead_deleted"

    # Property actions
    PROPERTY_CREATED = "property_created"
    PROPERTY_UPDATED = "property_updated"
    PROPERTY_DELETED = "property_deleted"
    PHOTO_ADDED = "photo_added"
    PHOTO_DELETED = "photo_deleted"

    # Rental actions
    RENTAL_CREATED = "rental_created"
    RENTAL_UPDATED = "rental_updated"
    RENTAL_DELETED = "rental_deleted"
    INSTALLMENT_CREATED = "installment_created"
    INSTALLMENT_PAID = "installment_paid"

    # User actions
    USER_REGISTERED = "user_registered"
    USER_LOGGED_IN = "user_logged_in"
