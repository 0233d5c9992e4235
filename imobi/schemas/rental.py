"""
Rental contract and installment schemas.
"""
import uuid
from typing import Optional
from datetime import date, datetime, timezone
from pydantic import BaseModel, field_validator, model_validator

from imobi.models.enums import RentalStatus, GuaranteeType, InstallmentStatus


class RentalCreate(BaseModel):
    """Create a rental contract."""
    property_id: Optional[uuid.UUID] = None
    code: Optional[str] = None
    start_date: date
    end_date: date
    rent_value: float
    condominium_fee: Optional[float] = None
    iptu: Optional[float] = None
    guarantee_type: Optional[GuaranteeType] = None
    guarantee_value: Optional[float] = None
    guarantee_description: Optional[str] = None
    adjustment_index: Optional[str] = None
    adjustment_month: Optional[int] = None
    status: RentalStatus = RentalStatus.ATIVO
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_period(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class RentalUpdate(BaseModel):
    """Update a rental contract."""
    property_id: Optional[uuid.UUID] = None
    code: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rent_value: Optional[float] = None
    condominium_fee: Optional[float] = None
    iptu: Optional[float] = None
    guarantee_type: Optional[GuaranteeType] = None
    guarantee_value: Optional[float] = None
    guarantee_description: Optional[str] = None
    adjustment_index: Optional[str] = None
    adjustment_month: Optional[int] = None
    status: Optional[RentalStatus] = None
    notes: Optional[str] = None

    @field_validator("start_date", "end_date", "rent_value", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value


class RentalResponse(BaseModel):
    id: uuid.UUID
    org_id: uuid.UUID
    property_id: Optional[uuid.UUID]
    code: Optional[str]
    start_date: date
    end_date: date
    rent_value: float
    condominium_fee: Optional[float]
    iptu: Optional[float]
    guarantee_type: Optional[GuaranteeType]
    guarantee_value: Optional[float]
    guarantee_description: Optional[str]
    adjustment_index: Optional[str]
    adjustment_month: Optional[int]
    status: RentalStatus
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InstallmentCreate(BaseModel):
    """Add a monthly installment to a rental."""
    reference_month: str  # YYYY-MM
    due_date: date
    rent_value: float
    condominium_fee: Optional[float] = None
    iptu: Optional[float] = None
    other_charges: Optional[float] = None
    discount: Optional[float] = None
    notes: Optional[str] = None


class InstallmentPayment(BaseModel):
    """Register a payment."""
    paid_value: float
    payment_date: Optional[datetime] = None  # defaults to now
    late_fee: Optional[float] = None

    @field_validator("payment_date")
    @classmethod
    def to_naive_utc(cls, value):
        # Payment dates are stored as naive UTC
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class InstallmentResponse(BaseModel):
    id: uuid.UUID
    rental_id: uuid.UUID
    reference_month: str
    due_date: date
    rent_value: float
    condominium_fee: Optional[float]
    iptu: Optional[float]
    late_fee: Optional[float]
    discount: Optional[float]
    other_charges: Optional[float]
    total_value: float
    paid_value: Optional[float]
    payment_date: Optional[datetime]
    status: InstallmentStatus
    notes: Optional[str]

    class Config:
        from_attributes = True
