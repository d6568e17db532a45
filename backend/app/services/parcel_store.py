"""
Parcel Store.

Authoritative record of each parcel's current state. Methods flush but never
commit; the status coordinator owns the transaction.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import (
    AlreadyPaidError,
    ParcelNotDeletableError,
    ResourceNotFoundError,
    ValidationError,
)
from backend.app.core.time_utils import utcnow
from backend.app.models.parcel import Parcel
from backend.app.models.parcel_enums import ParcelStatus, PaymentStatus
from backend.app.schemas.parcel import ParcelCreate

logger = logging.getLogger(__name__)


class ParcelStore:

    @staticmethod
    async def create(db: AsyncSession, draft: ParcelCreate, now: Optional[datetime] = None) -> Parcel:
        """
        Insert a new parcel.

        Status and payment status are always Pending / Not Paid, whatever the
        client sent.

        Raises:
            ValidationError: creator email or tracking code missing, or the
                tracking code is already taken
        """
        tracking_code = (draft.tracking_code or "").strip()
        creator = draft.created_by
        if not creator or not creator.email:
            raise ValidationError("Creator email is required", details={"field": "created_by.email"})
        if not tracking_code:
            raise ValidationError("Tracking code is required", details={"field": "tracking_code"})

        existing = await db.execute(select(Parcel.id).where(Parcel.tracking_code == tracking_code))
        if existing.scalar_one_or_none() is not None:
            raise ValidationError(
                f"Parcel with tracking code '{tracking_code}' already exists",
                details={"field": "tracking_code"}
            )

        now = now or utcnow()
        parcel = Parcel(
            tracking_code=tracking_code,
            title=draft.title,
            parcel_type=draft.parcel_type,
            weight_kg=draft.weight_kg,
            fare=draft.fare,
            created_by_name=creator.name,
            created_by_email=str(creator.email),
            sender_name=draft.sender_name,
            sender_region=draft.sender_region,
            sender_warehouse=draft.sender_warehouse,
            receiver_name=draft.receiver_name,
            receiver_region=draft.receiver_region,
            receiver_warehouse=draft.receiver_warehouse,
            status=ParcelStatus.PENDING,
            payment_status=PaymentStatus.NOT_PAID,
            created_at=now,
            updated_at=now,
        )
        db.add(parcel)
        await db.flush()
        return parcel

    @staticmethod
    async def find_by_id(db: AsyncSession, parcel_id: int) -> Parcel:
        """Load a parcel by internal id, raising ResourceNotFoundError if absent."""
        result = await db.execute(
            select(Parcel).where(Parcel.id == parcel_id).execution_options(populate_existing=True)
        )
        parcel = result.scalar_one_or_none()
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id)
        return parcel

    @staticmethod
    async def find_by_tracking_code(db: AsyncSession, tracking_code: str) -> Parcel:
        """Load a parcel by tracking code, raising ResourceNotFoundError if absent."""
        result = await db.execute(
            select(Parcel)
            .where(Parcel.tracking_code == tracking_code)
            .execution_options(populate_existing=True)
        )
        parcel = result.scalar_one_or_none()
        if parcel is None:
            raise ResourceNotFoundError("Parcel", tracking_code)
        return parcel

    @staticmethod
    async def list_by_creator(db: AsyncSession, email: Optional[str] = None) -> List[Parcel]:
        """List parcels newest first, optionally only those booked by ``email``."""
        query = select(Parcel)
        if email:
            query = query.where(Parcel.created_by_email == email)
        query = query.order_by(Parcel.created_at.desc(), Parcel.id.desc())

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def update_status(
        db: AsyncSession,
        parcel_id: int,
        new_status: ParcelStatus,
        actor: str,
        now: Optional[datetime] = None
    ) -> Parcel:
        """
        Set a parcel's status.

        Delivered stamps ``delivered_at``; every other status clears it.
        """
        parcel = await ParcelStore.find_by_id(db, parcel_id)
        now = now or utcnow()

        previous = parcel.status
        parcel.status = new_status
        parcel.delivered_at = now if new_status == ParcelStatus.DELIVERED else None
        parcel.updated_at = now
        await db.flush()

        logger.info(
            "Parcel %s status %s -> %s by %s",
            parcel.tracking_code, previous.value, new_status.value, actor
        )
        return parcel

    @staticmethod
    async def record_payment(
        db: AsyncSession,
        tracking_code: str,
        payment_info: Dict[str, Any],
        now: Optional[datetime] = None
    ) -> Parcel:
        """
        Mark a parcel as paid.

        The Not Paid check and the write are one conditional UPDATE, so two
        concurrent confirmations cannot both succeed.

        Raises:
            ResourceNotFoundError: no parcel with this tracking code
            AlreadyPaidError: the parcel is already paid
        """
        stmt = (
            update(Parcel)
            .where(
                Parcel.tracking_code == tracking_code,
                Parcel.payment_status == PaymentStatus.NOT_PAID,
            )
            .values(
                payment_status=PaymentStatus.PAID,
                payment_info=payment_info,
                updated_at=now or utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)

        if result.rowcount == 0:
            # Distinguish "absent" from "already paid"
            await ParcelStore.find_by_tracking_code(db, tracking_code)
            raise AlreadyPaidError(tracking_code)

        return await ParcelStore.find_by_tracking_code(db, tracking_code)

    @staticmethod
    async def delete(db: AsyncSession, parcel_id: int) -> Parcel:
        """
        Delete a parcel in a terminal state.

        Raises:
            ResourceNotFoundError: parcel absent
            ParcelNotDeletableError: parcel is not Delivered or Cancelled
        """
        parcel = await ParcelStore.find_by_id(db, parcel_id)

        if not parcel.status.is_terminal:
            raise ParcelNotDeletableError(parcel.id, parcel.status.value)

        await db.delete(parcel)
        await db.flush()
        return parcel
