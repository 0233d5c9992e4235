"""
Rental contract and installment repositories.
"""
import uuid
from typing import Optional, List
from datetime import datetime

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.models.rental import Rental, RentalInstallment
from imobi.models.enums import RentalStatus, InstallmentStatus
from imobi.repositories.base import BaseRepository, data_access


class RentalRepository(BaseRepository[Rental]):
    """Repository for Rental operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Rental, session)

    async def count_active(self, org_id: uuid.UUID) -> int:
        """Contracts currently running."""
        return await self.count(org_id, {"status": RentalStatus.ATIVO})


class InstallmentRepository(BaseRepository[RentalInstallment]):
    """Repository for RentalInstallment operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(RentalInstallment, session)

    @data_access
    async def for_rental(self, rental_id: uuid.UUID) -> List[RentalInstallment]:
        """Installments of a contract ordered by due date."""
        query = select(RentalInstallment).where(
            RentalInstallment.rental_id == rental_id
        ).order_by(RentalInstallment.due_date.asc())
        result = await self.session.exec(query)
        return list(result.all())

    @data_access
    async def paid_since(
        self,
        org_id: uuid.UUID,
        since: datetime,
        until: Optional[datetime] = None
    ) -> List[RentalInstallment]:
        """Paid installments of the organization with payment_date in range."""
        query = select(RentalInstallment).join(
            Rental, Rental.id == RentalInstallment.rental_id
        ).where(
            Rental.org_id == org_id,
            RentalInstallment.status == InstallmentStatus.PAGO,
            RentalInstallment.payment_date >= since
        )
        if until is not None:
            query = query.where(RentalInstallment.payment_date < until)
        result = await self.session.exec(query)
        return list(result.all())

    @data_access
    async def mark_paid(
        self,
        installment_id: uuid.UUID,
        paid_value: float,
        payment_date: datetime,
        late_fee: Optional[float] = None
    ) -> Optional[RentalInstallment]:
        """Register a payment."""
        installment = await self.session.get(RentalInstallment, installment_id)
        if not installment:
            return None

        installment.paid_value = paid_value
        installment.payment_date = payment_date
        installment.status = InstallmentStatus.PAGO
        if late_fee is not None:
            installment.late_fee = late_fee
        installment.updated_at = datetime.utcnow()

        self.session.add(installment)
        await self.session.commit()
        await self.session.refresh(installment)
        return installment
