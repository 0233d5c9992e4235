"""
Rental contracts API routes.
"""
import uuid
from typing import Optional, List
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.database import get_session
from imobi.services.rental_service import RentalService
from imobi.models.enums import RentalStatus
from imobi.schemas.rental import (
    RentalCreate, RentalUpdate, RentalResponse,
    InstallmentCreate, InstallmentPayment, InstallmentResponse
)
from imobi.core.pagination import PaginatedResponse
from imobi.api.deps import get_current_user
from imobi.models.user import User

router = APIRouter(prefix="/api/rentals", tags=["rentals"])


@router.post("/", response_model=RentalResponse, status_code=201)
async def create_rental(
    rental_data: RentalCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Create a rental contract."""
    rental_service = RentalService(session)
    return await rental_service.create(current_user.org_id, current_user.id, rental_data)


@router.get("/", response_model=PaginatedResponse[RentalResponse])
async def list_rentals(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[RentalStatus] = None,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List rental contracts."""
    rental_service = RentalService(session)
    result = await rental_service.list(current_user.org_id, status, page, limit)
    result["items"] = [RentalResponse.model_validate(r) for r in result["items"]]
    return result


@router.post("/installments/{installment_id}/pay", response_model=InstallmentResponse)
async def pay_installment(
    installment_id: uuid.UUID,
    payment: InstallmentPayment,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Register the payment of an installment."""
    rental_service = RentalService(session)
    return await rental_service.pay_installment(
        current_user.org_id, current_user.id, installment_id, payment
    )


@router.get("/{rental_id}", response_model=RentalResponse)
async def get_rental(
    rental_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    rental_service = RentalService(session)
    return await rental_service.get(current_user.org_id, rental_id)


@router.patch("/{rental_id}", response_model=RentalResponse)
async def update_rental(
    rental_id: uuid.UUID,
    rental_data: RentalUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Update a rental contract."""
    rental_service = RentalService(session)
    return await rental_service.update(current_user.org_id, current_user.id, rental_id, rental_data)


@router.delete("/{rental_id}", status_code=204)
async def delete_rental(
    rental_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Delete a contract and its installments."""
    rental_service = RentalService(session)
    await rental_service.delete(current_user.org_id, current_user.id, rental_id)


# Installments

@router.get("/{rental_id}/installments", response_model=List[InstallmentResponse])
async def list_installments(
    rental_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    rental_service = RentalService(session)
    return await rental_service.list_installments(current_user.org_id, rental_id)


@router.post("/{rental_id}/installments", response_model=InstallmentResponse, status_code=201)
async def add_installment(
    rental_id: uuid.UUID,
    installment_data: InstallmentCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Add a monthly installment to a contract."""
    rental_service = RentalService(session)
    return await rental_service.add_installment(
        current_user.org_id, current_user.id, rental_id, installment_data
    )
