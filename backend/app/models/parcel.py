"""
Parcel database model.

Merchants book parcels; riders and admins move them through the lifecycle.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, JSON
from backend.app.db.session import Base
from backend.app.models.parcel_enums import ParcelStatus, PaymentStatus


class Parcel(Base):
    """
    Parcel model for the parcel tracking platform.

    ``id`` is the internal identifier; ``tracking_code`` is the customer-facing
    code, unique and immutable once assigned. Status history lives in the
    tracking ledger (``tracking_events``), not here.
    """
    __tablename__ = "parcels"
    # Ledger rows keep their parcel_id after deletion; ids must never be reused
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Parcel identification
    tracking_code = Column(String(64), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=True)
    parcel_type = Column(String(50), nullable=False)
    weight_kg = Column(Float, nullable=True)
    fare = Column(Float, nullable=False, default=0.0)

    # Creator (merchant who booked the parcel)
    created_by_name = Column(String(255), nullable=True)
    created_by_email = Column(String(255), nullable=False, index=True)

    # Routing
    sender_name = Column(String(255), nullable=True)
    sender_region = Column(String(100), nullable=False)
    sender_warehouse = Column(String(100), nullable=False)
    receiver_name = Column(String(255), nullable=True)
    receiver_region = Column(String(100), nullable=False)
    receiver_warehouse = Column(String(100), nullable=False)

    # Status
    status = Column(Enum(ParcelStatus), default=ParcelStatus.PENDING, nullable=False, index=True)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.NOT_PAID, nullable=False)
    payment_info = Column(JSON, nullable=True)

    # Timestamps (naive UTC, set by the store)
    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=False)
    delivered_at = Column(DateTime, nullable=True)

    @property
    def created_by(self) -> dict:
        return {"name": self.created_by_name, "email": self.created_by_email}

    def __repr__(self):
        return f"<Parcel(id={self.id}, code='{self.tracking_code}', status='{self.status.value}')>"
