"""
Parcel Status Enumerations.
"""

import enum


class ParcelStatus(str, enum.Enum):
    """
    Parcel lifecycle status.

    Status flow:
        PENDING → PICKED_UP → IN_TRANSIT → OUT_FOR_DELIVERY → DELIVERED
        CANCELLED is reachable through self-service cancellation
    DELIVERED and CANCELLED are terminal.
    """
    PENDING = "Pending"
    PICKED_UP = "PickedUp"
    IN_TRANSIT = "InTransit"
    OUT_FOR_DELIVERY = "OutForDelivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({ParcelStatus.DELIVERED, ParcelStatus.CANCELLED})


class PaymentStatus(str, enum.Enum):
    """Payment status. NOT_PAID → PAID is one-way."""
    NOT_PAID = "Not Paid"
    PAID = "Paid"
