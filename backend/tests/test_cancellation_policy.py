"""
Unit tests for the cancellation policy.

Pure decisions: no database, no client.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from backend.app.domain.parcels import cancellation_policy
from backend.app.domain.parcels.cancellation_policy import (
    CENTRAL_HUB,
    REASON_CROSS_HUB_WINDOW_EXPIRED,
    REASON_SAME_CENTRAL_HUB,
    REASON_WINDOW_EXPIRED,
    hours_since,
)

NOW = datetime(2026, 3, 10, 12, 0, 0)


def make_parcel(hours_ago, sender_region="Dhaka", receiver_region="Chattogram",
                sender_warehouse="Mirpur Hub", receiver_warehouse="Agrabad Hub"):
    return SimpleNamespace(
        sender_region=sender_region,
        receiver_region=receiver_region,
        sender_warehouse=sender_warehouse,
        receiver_warehouse=receiver_warehouse,
        created_at=NOW - timedelta(hours=hours_ago),
    )


def test_fresh_cross_region_parcel_is_cancellable():
    decision = cancellation_policy.evaluate(make_parcel(1), NOW)
    assert decision.allowed is True
    assert decision.reason is None


def test_same_central_hub_is_never_cancellable():
    for hours_ago in (0, 0.5, 5, 30):
        parcel = make_parcel(
            hours_ago,
            receiver_region="Dhaka",
            sender_warehouse=CENTRAL_HUB,
            receiver_warehouse=CENTRAL_HUB,
        )
        decision = cancellation_policy.evaluate(parcel, NOW)
        assert decision.allowed is False
        assert decision.reason == REASON_SAME_CENTRAL_HUB


def test_central_hub_in_different_regions_uses_time_rules():
    parcel = make_parcel(2, sender_warehouse=CENTRAL_HUB, receiver_warehouse=CENTRAL_HUB)
    assert cancellation_policy.evaluate(parcel, NOW).allowed is True


def test_window_expired_after_24_hours():
    decision = cancellation_policy.evaluate(make_parcel(30), NOW)
    assert decision.allowed is False
    assert decision.reason == REASON_WINDOW_EXPIRED


def test_same_region_cross_hub_window_is_8_hours():
    late = make_parcel(9, receiver_region="Dhaka", receiver_warehouse="Uttara Hub")
    early = make_parcel(5, receiver_region="Dhaka", receiver_warehouse="Uttara Hub")

    denied = cancellation_policy.evaluate(late, NOW)
    assert denied.allowed is False
    assert denied.reason == REASON_CROSS_HUB_WINDOW_EXPIRED

    assert cancellation_policy.evaluate(early, NOW).allowed is True


def test_same_region_same_hub_only_bound_by_24_hours():
    parcel = make_parcel(20, receiver_region="Dhaka", receiver_warehouse="Mirpur Hub")
    assert cancellation_policy.evaluate(parcel, NOW).allowed is True


def test_boundaries_are_inclusive():
    at_24 = make_parcel(24)
    at_8 = make_parcel(8, receiver_region="Dhaka", receiver_warehouse="Uttara Hub")

    assert cancellation_policy.evaluate(at_24, NOW).allowed is True
    assert cancellation_policy.evaluate(at_8, NOW).allowed is True

    just_over = make_parcel(24 + 1 / 3600)
    assert cancellation_policy.evaluate(just_over, NOW).reason == REASON_WINDOW_EXPIRED


def test_24_hour_rule_reported_before_cross_hub_rule():
    parcel = make_parcel(30, receiver_region="Dhaka", receiver_warehouse="Uttara Hub")
    assert cancellation_policy.evaluate(parcel, NOW).reason == REASON_WINDOW_EXPIRED


def test_timezone_aware_now_is_normalized():
    parcel = make_parcel(3)
    aware_now = NOW.replace(tzinfo=timezone.utc)

    assert hours_since(parcel.created_at, aware_now) == 3.0
    assert cancellation_policy.evaluate(parcel, aware_now).allowed is True
