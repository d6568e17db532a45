"""
Audit Log Database Model.

Tracks parcel lifecycle actions for admin auditing.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from backend.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model for tracking parcel actions.

    Events logged:
    - PARCEL_CREATED / PARCEL_DELETED
    - PARCEL_CANCELLED
    - PARCEL_STATUS_UPDATED
    - PARCEL_PAYMENT_CONFIRMED
    - TRACKING_EVENT_RECORDED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action ("System" for automated actions)
    actor_email = Column(String(255), index=True, nullable=True)
    actor_name = Column(String(255), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Which parcel was affected
    parcel_id = Column(Integer, index=True, nullable=True)
    tracking_code = Column(String(64), nullable=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    timestamp = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_email}, parcel={self.parcel_id})>"
