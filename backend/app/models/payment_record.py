"""
Payment Record database model.

Denormalized reporting copy of every confirmed parcel payment.
"""

from sqlalchemy import Column, Integer, Float, DateTime, String
from backend.app.db.session import Base


class PaymentRecord(Base):
    """
    Payment ledger entry.

    Written in the same unit of work as the parcel's ``payment_info`` and built
    from the same ``PaymentConfirmed`` event, so both copies always agree.
    At most one row per parcel. A tracking code freed by deleting its parcel
    can be booked and paid again, so the code alone is not unique here.
    NO updates or deletions allowed.
    """
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Linkage (weak, mirrors the tracking ledger)
    tracking_code = Column(String(64), nullable=False, index=True)
    parcel_id = Column(Integer, unique=True, nullable=False, index=True)

    # Financials
    payment_intent_id = Column(String(255), nullable=True)
    amount = Column(Float, nullable=False)
    payer_email = Column(String(255), nullable=True, index=True)

    # Timestamps (Immutable - no updated_at)
    paid_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<PaymentRecord(id={self.id}, code='{self.tracking_code}', amount={self.amount})>"
