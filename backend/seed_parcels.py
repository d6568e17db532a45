"""
Database seeding script for demo parcels.

Books a handful of parcels through the status coordinator, so each one gets
its initial tracking event and audit entry, then moves some along the
lifecycle. Run after the database is reachable; tables are created here too.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.app.db.session import AsyncSessionLocal, Base, engine
from backend.app.core.exceptions import ValidationError
from backend.app.domain.parcels.context import ParcelContext
from backend.app.domain.parcels.status_coordinator import StatusTransitionCoordinator
from backend.app.models.enums import UserRole
from backend.app.models.parcel_enums import ParcelStatus
from backend.app.schemas.parcel import CreatedBy, ParcelCreate

import backend.app.models.parcel  # noqa: F401
import backend.app.models.tracking_event  # noqa: F401
import backend.app.models.payment_record  # noqa: F401
import backend.app.models.audit_log  # noqa: F401
import backend.app.models.notification  # noqa: F401

SEED_ADMIN = {"sub": "admin@parcels.io", "name": "Seed Admin", "role": UserRole.ADMIN.value}
SEED_MERCHANT = CreatedBy(name="Demo Merchant", email="merchant@parcels.io")

DEMO_PARCELS = [
    ("DEMO-0001", "Dhaka", "Mirpur Hub", "Chattogram", "Agrabad Hub", None),
    ("DEMO-0002", "Dhaka", "Mirpur Hub", "Dhaka", "Uttara Hub", ParcelStatus.PICKED_UP),
    ("DEMO-0003", "Dhaka", "Central Hub", "Dhaka", "Central Hub", ParcelStatus.IN_TRANSIT),
    ("DEMO-0004", "Sylhet", "Zindabazar Hub", "Khulna", "Sonadanga Hub", ParcelStatus.DELIVERED),
]


async def seed_parcels():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting parcel seeding...")
        ctx = ParcelContext(db=db, actor=SEED_ADMIN)

        for code, s_region, s_hub, r_region, r_hub, target in DEMO_PARCELS:
            draft = ParcelCreate(
                tracking_code=code,
                title=f"Demo parcel {code}",
                parcel_type="non-document",
                weight_kg=1.5,
                fare=120.0,
                created_by=SEED_MERCHANT,
                sender_name="Demo Sender",
                sender_region=s_region,
                sender_warehouse=s_hub,
                receiver_name="Demo Receiver",
                receiver_region=r_region,
                receiver_warehouse=r_hub,
            )
            try:
                parcel = await StatusTransitionCoordinator.create_parcel(ctx, draft)
            except ValidationError:
                print(f"ℹ️  {code} already exists, skipping")
                await db.rollback()
                continue

            if target is not None:
                await StatusTransitionCoordinator.advance_status(ctx, parcel.id, target)
            print(f"✅ Seeded {code} ({(target or ParcelStatus.PENDING).value})")

    await engine.dispose()
    print("\n🎉 Parcel seeding completed!")


if __name__ == "__main__":
    asyncio.run(seed_parcels())
