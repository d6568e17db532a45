"""
Parcel API Endpoints.

Booking, lookup, self-service cancellation, deletion and payment confirmation.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.db.session import get_db
from backend.app.schemas.parcel import (
    ActionResponse, ParcelCreate, ParcelResponse, PaymentConfirmation
)
from backend.app.core.guards import require_role
from backend.app.core.dependencies import get_current_user
from backend.app.models.enums import UserRole
from backend.app.domain.parcels.context import ParcelContext
from backend.app.domain.parcels.status_coordinator import StatusTransitionCoordinator
from backend.app.services.parcel_store import ParcelStore

router = APIRouter(prefix="/parcels", tags=["Parcels"])


@router.post("", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    current_user: dict = Depends(require_role([UserRole.MERCHANT, UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """
    Book a new parcel (Merchant or Admin).

    The parcel always starts Pending and Not Paid, and gets its first
    tracking event.
    """
    ctx = ParcelContext(db=db, actor=current_user)
    parcel = await StatusTransitionCoordinator.create_parcel(ctx, parcel_data)
    return ParcelResponse.model_validate(parcel)


@router.get("", response_model=List[ParcelResponse])
async def list_parcels(
    email: Optional[str] = Query(None, description="Only parcels booked by this email"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List parcels, newest first."""
    parcels = await ParcelStore.list_by_creator(db, email)
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.get("/{tracking_code}", response_model=ParcelResponse)
async def get_parcel_by_tracking_code(
    tracking_code: str = Path(..., description="Customer-facing tracking code"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Fetch a parcel by its tracking code."""
    parcel = await ParcelStore.find_by_tracking_code(db, tracking_code)
    return ParcelResponse.model_validate(parcel)


@router.patch("/{parcel_id}/cancel", response_model=ActionResponse)
async def cancel_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Cancel a parcel (creator or Admin).

    Returns 400 with the policy reason when the cancellation rules forbid it.
    """
    ctx = ParcelContext(db=db, actor=current_user)
    parcel = await StatusTransitionCoordinator.cancel(ctx, parcel_id)
    return ActionResponse(
        success=True,
        message="Parcel cancelled",
        parcel=ParcelResponse.model_validate(parcel)
    )


@router.delete("/{parcel_id}", response_model=ActionResponse)
async def delete_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user: dict = Depends(require_role([UserRole.MERCHANT, UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a Delivered or Cancelled parcel (Merchant owner or Admin).
    """
    ctx = ParcelContext(db=db, actor=current_user)
    await StatusTransitionCoordinator.delete_parcel(ctx, parcel_id)
    return ActionResponse(success=True, message="Parcel deleted")


@router.patch("/{tracking_code}/payment", response_model=ActionResponse)
async def confirm_payment(
    payment: PaymentConfirmation,
    tracking_code: str = Path(..., description="Customer-facing tracking code"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Record a successful gateway payment.

    Returns 409 if the parcel is already paid.
    """
    ctx = ParcelContext(db=db, actor=current_user)
    parcel = await StatusTransitionCoordinator.confirm_payment(ctx, tracking_code, payment)
    return ActionResponse(
        success=True,
        message="Payment recorded",
        parcel=ParcelResponse.model_validate(parcel)
    )
