"""
Tests for the parcel store and the tracking ledger.

These run directly against a session; the store flushes and the test commits.
"""

import pytest
from datetime import timedelta

from backend.app.core.exceptions import (
    AlreadyPaidError,
    ParcelNotDeletableError,
    ResourceNotFoundError,
    ValidationError,
)
from backend.app.core.time_utils import utcnow
from backend.app.models.parcel_enums import ParcelStatus, PaymentStatus
from backend.app.schemas.parcel import CreatedBy, ParcelCreate
from backend.app.services.parcel_store import ParcelStore
from backend.app.services.tracking_ledger import SYSTEM_ACTOR, TrackingLedger


def make_draft(parcel_payload, **overrides):
    data = parcel_payload(**overrides)
    data.setdefault("created_by", {"name": "Maya Merchant", "email": "merchant@parcels.io"})
    return ParcelCreate(**data)


@pytest.mark.asyncio
async def test_create_starts_pending_and_unpaid(db_session, parcel_payload):
    parcel = await ParcelStore.create(db_session, make_draft(parcel_payload))
    await db_session.commit()

    assert parcel.id is not None
    assert parcel.status == ParcelStatus.PENDING
    assert parcel.payment_status == PaymentStatus.NOT_PAID
    assert parcel.payment_info is None
    assert parcel.delivered_at is None
    assert parcel.created_by == {"name": "Maya Merchant", "email": "merchant@parcels.io"}


@pytest.mark.asyncio
async def test_create_requires_creator_email_and_tracking_code(db_session, parcel_payload):
    no_creator = ParcelCreate(**parcel_payload())
    with pytest.raises(ValidationError) as exc_info:
        await ParcelStore.create(db_session, no_creator)
    assert exc_info.value.message == "Creator email is required"

    blank_code = make_draft(parcel_payload, tracking_code="   ")
    with pytest.raises(ValidationError) as exc_info:
        await ParcelStore.create(db_session, blank_code)
    assert exc_info.value.message == "Tracking code is required"


@pytest.mark.asyncio
async def test_duplicate_tracking_code_rejected(db_session, parcel_payload):
    await ParcelStore.create(db_session, make_draft(parcel_payload))
    await db_session.commit()

    with pytest.raises(ValidationError) as exc_info:
        await ParcelStore.create(db_session, make_draft(parcel_payload))
    assert "already exists" in exc_info.value.message


@pytest.mark.asyncio
async def test_find_missing_parcel_raises(db_session):
    with pytest.raises(ResourceNotFoundError):
        await ParcelStore.find_by_id(db_session, 999)
    with pytest.raises(ResourceNotFoundError):
        await ParcelStore.find_by_tracking_code(db_session, "TRK-MISSING")


@pytest.mark.asyncio
async def test_list_by_creator_newest_first(db_session, parcel_payload):
    base = utcnow()
    await ParcelStore.create(db_session, make_draft(parcel_payload, tracking_code="TRK-A"), now=base)
    await ParcelStore.create(
        db_session, make_draft(parcel_payload, tracking_code="TRK-B"), now=base + timedelta(minutes=5)
    )
    await ParcelStore.create(
        db_session,
        make_draft(
            parcel_payload,
            tracking_code="TRK-C",
            created_by=CreatedBy(name="Other", email="other.merchant@parcels.io").model_dump(),
        ),
        now=base + timedelta(minutes=10),
    )
    await db_session.commit()

    mine = await ParcelStore.list_by_creator(db_session, "merchant@parcels.io")
    assert [p.tracking_code for p in mine] == ["TRK-B", "TRK-A"]

    everyone = await ParcelStore.list_by_creator(db_session)
    assert [p.tracking_code for p in everyone] == ["TRK-C", "TRK-B", "TRK-A"]


@pytest.mark.asyncio
async def test_update_status_stamps_and_clears_delivered_at(db_session, parcel_payload):
    parcel = await ParcelStore.create(db_session, make_draft(parcel_payload))

    delivered = await ParcelStore.update_status(db_session, parcel.id, ParcelStatus.DELIVERED, "admin")
    assert delivered.delivered_at is not None

    reopened = await ParcelStore.update_status(db_session, parcel.id, ParcelStatus.IN_TRANSIT, "admin")
    assert reopened.status == ParcelStatus.IN_TRANSIT
    assert reopened.delivered_at is None


@pytest.mark.asyncio
async def test_record_payment_only_once(db_session, parcel_payload):
    await ParcelStore.create(db_session, make_draft(parcel_payload))
    await db_session.commit()

    info = {"payment_intent_id": "pi_1", "amount": 150.0}
    paid = await ParcelStore.record_payment(db_session, "TRK-0001", info)
    await db_session.commit()

    assert paid.payment_status == PaymentStatus.PAID
    assert paid.payment_info == info

    with pytest.raises(AlreadyPaidError):
        await ParcelStore.record_payment(db_session, "TRK-0001", {"payment_intent_id": "pi_2"})

    reloaded = await ParcelStore.find_by_tracking_code(db_session, "TRK-0001")
    assert reloaded.payment_info["payment_intent_id"] == "pi_1"


@pytest.mark.asyncio
async def test_record_payment_unknown_parcel(db_session):
    with pytest.raises(ResourceNotFoundError):
        await ParcelStore.record_payment(db_session, "TRK-MISSING", {})


@pytest.mark.asyncio
async def test_delete_only_terminal_parcels(db_session, parcel_payload):
    parcel = await ParcelStore.create(db_session, make_draft(parcel_payload))
    await db_session.commit()

    with pytest.raises(ParcelNotDeletableError):
        await ParcelStore.delete(db_session, parcel.id)

    await ParcelStore.update_status(db_session, parcel.id, ParcelStatus.CANCELLED, "admin")
    await ParcelStore.delete(db_session, parcel.id)
    await db_session.commit()

    with pytest.raises(ResourceNotFoundError):
        await ParcelStore.find_by_id(db_session, parcel.id)


@pytest.mark.asyncio
async def test_ledger_accepts_orphans_and_orders_by_time(db_session):
    base = utcnow()
    await TrackingLedger.append(db_session, "TRK-X", 42, ParcelStatus.IN_TRANSIT, "Left hub", "rider", now=base)
    await TrackingLedger.append(db_session, "TRK-X", 42, ParcelStatus.PICKED_UP, "Picked", None,
                                now=base - timedelta(hours=1))
    await TrackingLedger.append(db_session, "TRK-Y", 43, ParcelStatus.PENDING, "", None, now=base)
    await db_session.commit()

    events = await TrackingLedger.list_for_parcel(db_session, 42)
    assert [e.status for e in events] == [ParcelStatus.PICKED_UP, ParcelStatus.IN_TRANSIT]
    assert events[0].updated_by == SYSTEM_ACTOR
    assert events[1].updated_by == "rider"

    assert await TrackingLedger.list_for_parcel(db_session, 999) == []
