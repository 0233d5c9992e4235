"""
Rental service - contracts and monthly installments.
"""
import logging
import uuid
from typing import Optional, List
from datetime import datetime

from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.core import view_store
from imobi.core.exceptions import raise_not_found, raise_validation_error
from imobi.repositories.rental_repo import RentalRepository, InstallmentRepository
from imobi.repositories.activity_repo import ActivityLogRepository
from imobi.models.rental import Rental, RentalInstallment
from imobi.models.enums import RentalStatus, InstallmentStatus
from imobi.models.activity import Actions
from imobi.schemas.rental import RentalCreate, RentalUpdate, InstallmentCreate, InstallmentPayment

logger = logging.getLogger(__name__)


class RentalService:
    """Service for rental contract operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.rental_repo = RentalRepository(session)
        self.installment_repo = InstallmentRepository(session)
        self.activity_repo = ActivityLogRepository(session)

    async def create(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        rental_data: RentalCreate
    ) -> Rental:
        """Create a rental contract."""
        data = rental_data.model_dump()
        data["org_id"] = org_id
        data["created_by"] = user_id

        rental = await self.rental_repo.create(data)
        logger.info("Rental %s created in org %s", rental.id, org_id)
        view_store.invalidate("rentals")

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.RENTAL_CREATED,
            entity_type="rental",
            entity_id=rental.id,
            description=f"Rental {rental.code or rental.id} created",
            meta_data={"rent_value": rental.rent_value}
        )
        return rental

    async def get(self, org_id: uuid.UUID, rental_id: uuid.UUID) -> Rental:
        rental = await self.rental_repo.get_for_org(org_id, rental_id)
        if not rental:
            raise_not_found("Rental", str(rental_id))
        return rental

    async def list(
        self,
        org_id: uuid.UUID,
        status: Optional[RentalStatus] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        return await self.rental_repo.list_paginated(
            org_id, {"status": status}, page, limit, order_by="start_date"
        )

    async def update(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        rental_id: uuid.UUID,
        rental_data: RentalUpdate
    ) -> Rental:
        rental = await self.get(org_id, rental_id)

        update_data = rental_data.model_dump(exclude_unset=True)
        start = update_data.get("start_date", rental.start_date)
        end = update_data.get("end_date", rental.end_date)
        if start and end and end < start:
            raise_validation_error("end_date must not be before start_date", "end_date")

        rental = await self.rental_repo.update(rental_id, update_data)
        view_store.invalidate("rentals", rental_id)

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.RENTAL_UPDATED,
            entity_type="rental",
            entity_id=rental_id,
            meta_data={"changes": list(update_data.keys())}
        )
        return rental

    async def delete(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        rental_id: uuid.UUID
    ) -> bool:
        """Delete a contract with its installments."""
        await self.get(org_id, rental_id)

        installments = await self.installment_repo.for_rental(rental_id)
        success = await self.rental_repo.delete_with(rental_id, installments)

        if success:
            view_store.invalidate("rentals", rental_id)
            view_store.invalidate("installments")
            await self.activity_repo.log(
                org_id=org_id,
                actor_id=user_id,
                action=Actions.RENTAL_DELETED,
                entity_type="rental",
                entity_id=rental_id
            )
        return success

    # Installments

    async def list_installments(self, org_id: uuid.UUID, rental_id: uuid.UUID) -> List[RentalInstallment]:
        await self.get(org_id, rental_id)
        return await self.installment_repo.for_rental(rental_id)

    async def add_installment(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        rental_id: uuid.UUID,
        data: InstallmentCreate
    ) -> RentalInstallment:
        """Add a monthly installment; total = rent + fees + charges - discount."""
        await self.get(org_id, rental_id)

        values = data.model_dump()
        values["rental_id"] = rental_id
        values["total_value"] = (
            data.rent_value
            + (data.condominium_fee or 0)
            + (data.iptu or 0)
            + (data.other_charges or 0)
            - (data.discount or 0)
        )

        installment = await self.installment_repo.create(values)
        view_store.invalidate("installments")

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.INSTALLMENT_CREATED,
            entity_type="installment",
            entity_id=installment.id,
            meta_data={"rental_id": str(rental_id), "reference_month": installment.reference_month}
        )
        return installment

    async def pay_installment(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        installment_id: uuid.UUID,
        payment: InstallmentPayment
    ) -> RentalInstallment:
        """Register the payment of an installment."""
        installment = await self.installment_repo.get(installment_id)
        if not installment:
            raise_not_found("Installment", str(installment_id))
        await self.get(org_id, installment.rental_id)

        if installment.status == InstallmentStatus.CANCELADO:
            raise_validation_error("Cancelled installments cannot be paid", "status")

        installment = await self.installment_repo.mark_paid(
            installment_id,
            paid_value=payment.paid_value,
            payment_date=payment.payment_date or datetime.utcnow(),
            late_fee=payment.late_fee
        )
        logger.info("Installment %s paid (%.2f)", installment_id, payment.paid_value)
        view_store.invalidate("installments", installment_id)

        await self.activity_repo.log(
            org_id=org_id,
            actor_id=user_id,
            action=Actions.INSTALLMENT_PAID,
            entity_type="installment",
            entity_id=installment_id,
            meta_data={"paid_value": payment.paid_value}
        )
        return installment
