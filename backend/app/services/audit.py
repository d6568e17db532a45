"""
Audit logging service for parcel lifecycle actions.

Provides centralized logging for admin auditing. Entries are flushed into the
caller's transaction, so they commit together with the action they describe.
"""

from typing import Optional, Dict, Any
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backend.app.core.time_utils import utcnow
from backend.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    PARCEL_CREATED = "PARCEL_CREATED"
    PARCEL_CANCELLED = "PARCEL_CANCELLED"
    PARCEL_DELETED = "PARCEL_DELETED"
    PARCEL_STATUS_UPDATED = "PARCEL_STATUS_UPDATED"
    PARCEL_PAYMENT_CONFIRMED = "PARCEL_PAYMENT_CONFIRMED"
    TRACKING_EVENT_RECORDED = "TRACKING_EVENT_RECORDED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_email: Optional[str] = None,
    actor_name: Optional[str] = None,
    parcel_id: Optional[int] = None,
    tracking_code: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    now: Optional[datetime] = None
) -> AuditLog:
    """
    Record a parcel action in the audit log.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_email: Email of the caller performing the action
        actor_name: Display name of the caller
        parcel_id: Parcel affected
        tracking_code: Tracking code of the parcel affected
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance (flushed, not committed)
    """
    audit_log = AuditLog(
        actor_email=actor_email,
        actor_name=actor_name,
        action=action,
        parcel_id=parcel_id,
        tracking_code=tracking_code,
        meta_data=metadata,
        timestamp=now or utcnow()
    )

    db.add(audit_log)
    await db.flush()

    return audit_log


async def get_parcel_audit_trail(
    db: AsyncSession,
    parcel_id: int,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve the audit trail of one parcel, most recent first.
    """
    query = select(AuditLog).where(AuditLog.parcel_id == parcel_id)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.order_by(desc(AuditLog.timestamp), desc(AuditLog.id)).limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())
