"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import parcels, tracking, admin_parcels, notifications

router = APIRouter()

# Parcel lifecycle endpoints
router.include_router(parcels.router)

# Tracking ledger endpoints
router.include_router(tracking.router)

# Admin status overrides
router.include_router(admin_parcels.router)

# Caller notification inbox
router.include_router(notifications.router)
