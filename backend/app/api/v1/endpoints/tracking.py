"""
Tracking Ledger API Endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.db.session import get_db
from backend.app.schemas.tracking import (
    TrackingEventCreate, TrackingEventCreated, TrackingEventResponse
)
from backend.app.core.guards import require_role
from backend.app.core.dependencies import get_current_user
from backend.app.models.enums import UserRole
from backend.app.domain.parcels.context import ParcelContext
from backend.app.domain.parcels.status_coordinator import StatusTransitionCoordinator
from backend.app.services.tracking_ledger import TrackingLedger

router = APIRouter(prefix="/tracking", tags=["Tracking"])


@router.post("", response_model=TrackingEventCreated)
async def append_tracking_event(
    event_data: TrackingEventCreate,
    current_user: dict = Depends(require_role([UserRole.RIDER, UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """
    Append a tracking event (Rider or Admin).

    The referenced parcel, if it exists, takes the event's status.
    """
    ctx = ParcelContext(db=db, actor=current_user)
    event = await StatusTransitionCoordinator.record_tracking_event(ctx, event_data)
    return TrackingEventCreated(success=True, inserted_id=event.id)


@router.get("/{parcel_id}", response_model=List[TrackingEventResponse])
async def list_tracking_events(
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Tracking history of a parcel in chronological order."""
    events = await TrackingLedger.list_for_parcel(db, parcel_id)
    return [TrackingEventResponse.model_validate(e) for e in events]
