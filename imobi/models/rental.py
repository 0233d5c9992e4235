"""
Rental contract and monthly installment models.
"""
import uuid
from datetime import date, datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from imobi.models.enums import RentalStatus, GuaranteeType, InstallmentStatus


class Rental(SQLModel, table=True):
    """
    Rental contract for a property. Scoped to organization.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    org_id: uuid.UUID = Field(foreign_key="organization.id", index=True)
    property_id: Optional[uuid.UUID] = Field(default=None, foreign_key="property.id", index=True)

    code: Optional[str] = Field(default=None, index=True)
    start_date: date
    end_date: date

    # Values
    rent_value: float
    condominium_fee: Optional[float] = None
    iptu: Optional[float] = None

    # Guarantee
    guarantee_type: Optional[GuaranteeType] = None
    guarantee_value: Optional[float] = None
    guarantee_description: Optional[str] = None

    # Yearly adjustment (IGP-M, IPCA...)
    adjustment_index: Optional[str] = None
    adjustment_month: Optional[int] = None

    status: RentalStatus = Field(default=RentalStatus.ATIVO, index=True)
    notes: Optional[str] = None

    created_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class RentalInstallment(SQLModel, table=True):
    """
    One monthly payment of a rental contract.
    Paid installments feed the dashboard revenue figures.
    """
    __tablename__ = "rental_installment"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    rental_id: uuid.UUID = Field(foreign_key="rental.id", index=True)

    reference_month: str  # YYYY-MM
    due_date: date

    rent_value: float
    condominium_fee: Optional[float] = None
    iptu: Optional[float] = None
    late_fee: Optional[float] = None
    discount: Optional[float] = None
    other_charges: Optional[float] = None
    total_value: float

    paid_value: Optional[float] = None
    payment_date: Optional[datetime] = Field(default=None, index=True)
    status: InstallmentStatus = Field(default=InstallmentStatus.PENDENTE, index=True)
    notes: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
