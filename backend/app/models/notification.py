"""
Notification Database Model.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, Enum
from backend.app.db.session import Base
import enum


class NotificationType(str, enum.Enum):
    INFO = "INFO"
    PARCEL_UPDATE = "PARCEL_UPDATE"
    PAYMENT_UPDATE = "PAYMENT_UPDATE"


class Notification(Base):
    """
    In-App Notification outbox.
    Delivery to devices is done by the notification service, not here.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Recipient (identity lives in the external identity service)
    recipient_email = Column(String(255), nullable=False, index=True)

    # Content
    type = Column(Enum(NotificationType), default=NotificationType.INFO, nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    metadata_payload = Column(JSON, nullable=True)

    # State
    is_read = Column(Boolean, default=False, nullable=False, index=True)

    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Notification(id={self.id}, to={self.recipient_email}, title='{self.title}')>"
