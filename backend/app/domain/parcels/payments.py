"""
Payment confirmation event.

The parcel's ``payment_info`` and the payment ledger row are both derived from
one ``PaymentConfirmed`` instance so the two copies cannot drift apart.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from backend.app.models.payment_record import PaymentRecord


@dataclass(frozen=True)
class PaymentConfirmed:
    tracking_code: str
    amount: float
    paid_at: datetime
    payment_intent_id: Optional[str] = None
    payer_email: Optional[str] = None

    def as_parcel_payment_info(self) -> Dict[str, Any]:
        return {
            "payment_intent_id": self.payment_intent_id,
            "amount": self.amount,
            "paid_at": self.paid_at.isoformat(),
            "payer_email": self.payer_email,
        }

    def to_payment_record(self, parcel_id: int) -> PaymentRecord:
        return PaymentRecord(
            tracking_code=self.tracking_code,
            parcel_id=parcel_id,
            payment_intent_id=self.payment_intent_id,
            amount=self.amount,
            payer_email=self.payer_email,
            paid_at=self.paid_at,
        )
