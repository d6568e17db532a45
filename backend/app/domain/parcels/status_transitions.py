"""
Parcel status transition table.

Only consulted when ``settings.enforce_status_transitions`` is on; by default
admins may move a parcel to any status.
"""

from typing import Dict, FrozenSet

from backend.app.models.parcel_enums import ParcelStatus

STATUS_TRANSITIONS: Dict[ParcelStatus, FrozenSet[ParcelStatus]] = {
    ParcelStatus.PENDING: frozenset({ParcelStatus.PICKED_UP, ParcelStatus.CANCELLED}),
    ParcelStatus.PICKED_UP: frozenset({ParcelStatus.IN_TRANSIT, ParcelStatus.CANCELLED}),
    ParcelStatus.IN_TRANSIT: frozenset({ParcelStatus.OUT_FOR_DELIVERY}),
    ParcelStatus.OUT_FOR_DELIVERY: frozenset({ParcelStatus.DELIVERED, ParcelStatus.IN_TRANSIT}),
    ParcelStatus.DELIVERED: frozenset(),
    ParcelStatus.CANCELLED: frozenset(),
}


def is_allowed_transition(current: ParcelStatus, new: ParcelStatus) -> bool:
    return new in STATUS_TRANSITIONS[current]
