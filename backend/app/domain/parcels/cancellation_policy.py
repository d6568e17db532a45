"""
Cancellation Policy (Domain Logic).

Pure decision function: no I/O, no clock. The caller passes ``now``.

Rules, first match wins:
1. Same region and both ends at the Central Hub: never cancellable.
2. More than 24 hours since booking: too late.
3. Same region, different hubs, more than 8 hours since booking: too late.
4. Otherwise allowed.

The structural rule runs before the time rules so a same-hub parcel is never
reported with a time-window reason. Limits are inclusive: exactly 24.0 or 8.0
hours is still within the window.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from backend.app.core.time_utils import to_naive_utc

CENTRAL_HUB = "Central Hub"
CANCELLATION_WINDOW_HOURS = 24.0
SAME_REGION_CROSS_HUB_WINDOW_HOURS = 8.0

REASON_SAME_CENTRAL_HUB = "Parcel cannot be cancelled (same regional central hub)."
REASON_WINDOW_EXPIRED = "Parcel can only be cancelled within 24 hours."
REASON_CROSS_HUB_WINDOW_EXPIRED = (
    "Parcel can only be cancelled within 8 hours for same region but different hub."
)


class CancellableParcel(Protocol):
    sender_region: str
    receiver_region: str
    sender_warehouse: str
    receiver_warehouse: str
    created_at: datetime


@dataclass(frozen=True)
class CancellationDecision:
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "CancellationDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "CancellationDecision":
        return cls(allowed=False, reason=reason)


def hours_since(created_at: datetime, now: datetime) -> float:
    """Wall-clock hours between booking and ``now`` as a float."""
    return (to_naive_utc(now) - to_naive_utc(created_at)).total_seconds() / 3600


def evaluate(parcel: CancellableParcel, now: datetime) -> CancellationDecision:
    same_region = parcel.sender_region == parcel.receiver_region

    if (
        same_region
        and parcel.sender_warehouse == CENTRAL_HUB
        and parcel.receiver_warehouse == CENTRAL_HUB
    ):
        return CancellationDecision.deny(REASON_SAME_CENTRAL_HUB)

    hours_diff = hours_since(parcel.created_at, now)

    if hours_diff > CANCELLATION_WINDOW_HOURS:
        return CancellationDecision.deny(REASON_WINDOW_EXPIRED)

    if (
        same_region
        and parcel.sender_warehouse != parcel.receiver_warehouse
        and hours_diff > SAME_REGION_CROSS_HUB_WINDOW_HOURS
    ):
        return CancellationDecision.deny(REASON_CROSS_HUB_WINDOW_EXPIRED)

    return CancellationDecision.allow()
