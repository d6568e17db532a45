"""
Admin Parcel API Endpoints.

Status overrides with audit logging, and the audit trail itself.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.db.session import get_db
from backend.app.schemas.parcel import ActionResponse, ParcelResponse, ParcelStatusUpdate
from backend.app.schemas.notification import AuditLogResponse
from backend.app.core.guards import require_admin
from backend.app.domain.parcels.context import ParcelContext
from backend.app.domain.parcels.status_coordinator import StatusTransitionCoordinator
from backend.app.services.audit import get_parcel_audit_trail

router = APIRouter(prefix="/admin/parcels", tags=["Admin - Parcels"])


@router.patch("/{parcel_id}/status", response_model=ActionResponse)
async def update_parcel_status(
    update: ParcelStatusUpdate,
    parcel_id: int = Path(..., description="Parcel ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Set a parcel's status (admin-only).

    Time-window cancellation rules do not apply here.
    """
    ctx = ParcelContext(db=db, actor=admin)
    parcel = await StatusTransitionCoordinator.advance_status(
        ctx, parcel_id, update.status, update.message
    )
    return ActionResponse(
        success=True,
        message=f"Status updated to {update.status.value}",
        parcel=ParcelResponse.model_validate(parcel)
    )


@router.get("/{parcel_id}/audit", response_model=List[AuditLogResponse])
async def get_parcel_audit(
    parcel_id: int = Path(..., description="Parcel ID"),
    action: Optional[str] = Query(None, description="Filter by AuditAction"),
    limit: int = Query(100, ge=1, le=500),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Audit trail of one parcel, most recent first (admin-only).

    Entries outlive the parcel, so deleted parcels still have a trail.
    """
    entries = await get_parcel_audit_trail(db, parcel_id, action=action, limit=limit)
    return [AuditLogResponse.model_validate(e) for e in entries]
