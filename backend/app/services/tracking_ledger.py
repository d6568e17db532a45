"""
Tracking Ledger.

Append-only per-parcel event log. Appends never check that the referenced
parcel exists; orphaned entries are tolerated.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.time_utils import utcnow
from backend.app.models.parcel_enums import ParcelStatus
from backend.app.models.tracking_event import TrackingEvent

SYSTEM_ACTOR = "System"


class TrackingLedger:

    @staticmethod
    async def append(
        db: AsyncSession,
        tracking_code: Optional[str],
        parcel_id: Optional[int],
        status: ParcelStatus,
        message: str,
        actor: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> TrackingEvent:
        """Append one event and return it with its id assigned."""
        event = TrackingEvent(
            tracking_code=tracking_code,
            parcel_id=parcel_id,
            status=status,
            message=message or "",
            updated_by=actor or SYSTEM_ACTOR,
            time=now or utcnow(),
        )
        db.add(event)
        await db.flush()
        return event

    @staticmethod
    async def list_for_parcel(db: AsyncSession, parcel_id: int) -> List[TrackingEvent]:
        """
        Events of one parcel in chronological order.

        Each call runs a new query, so the result is a fresh snapshot.
        """
        result = await db.execute(
            select(TrackingEvent)
            .where(TrackingEvent.parcel_id == parcel_id)
            .order_by(TrackingEvent.time.asc(), TrackingEvent.id.asc())
        )
        return list(result.scalars().all())
