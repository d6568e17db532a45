"""
Notification Service.

Writes parcel notifications to the outbox table; device delivery happens
elsewhere.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from datetime import datetime
from typing import Optional, Dict, Any, List

from backend.app.core.time_utils import utcnow
from backend.app.models.notification import Notification, NotificationType


class NotificationService:

    @staticmethod
    async def create_notification(
        db: AsyncSession,
        recipient_email: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        metadata: Optional[Dict[str, Any]] = None,
        now: Optional[datetime] = None
    ) -> Notification:
        """Create a single notification."""
        notif = Notification(
            recipient_email=recipient_email,
            type=type,
            title=title,
            message=message,
            metadata_payload=metadata,
            created_at=now or utcnow()
        )
        db.add(notif)
        await db.flush()  # Caller commits
        return notif

    @staticmethod
    async def list_for_recipient(
        db: AsyncSession,
        recipient_email: str,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[Notification]:
        """Most recent notifications of one recipient."""
        query = select(Notification).where(Notification.recipient_email == recipient_email)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))

        result = await db.execute(
            query.order_by(desc(Notification.created_at), desc(Notification.id)).limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: int, recipient_email: str) -> bool:
        """
        Mark one of the recipient's notifications as read.

        Returns False when the notification does not exist or belongs to
        someone else.
        """
        result = await db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.recipient_email == recipient_email,
            )
        )
        notif = result.scalar_one_or_none()
        if notif is None:
            return False

        notif.is_read = True
        await db.flush()
        return True
