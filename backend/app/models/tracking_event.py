"""
Tracking Event database model.

Append-only status history of a parcel.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum
from backend.app.db.session import Base
from backend.app.models.parcel_enums import ParcelStatus


class TrackingEvent(Base):
    """
    Tracking ledger entry.

    ``parcel_id`` is a weak reference: there is no foreign key, so entries
    survive parcel deletion and may reference parcels that never existed.
    NO updates or deletions allowed.
    """
    __tablename__ = "tracking_events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    tracking_code = Column(String(64), nullable=True, index=True)
    parcel_id = Column(Integer, nullable=True, index=True)

    status = Column(Enum(ParcelStatus), nullable=False)
    message = Column(Text, nullable=False, default="")
    updated_by = Column(String(255), nullable=False, default="System")

    # Timestamps (Immutable - no updated_at)
    time = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<TrackingEvent(id={self.id}, parcel_id={self.parcel_id}, status='{self.status.value}')>"
