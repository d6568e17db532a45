"""
Tracking ledger schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from backend.app.models.parcel_enums import ParcelStatus


class TrackingEventCreate(BaseModel):
    """
    Schema for appending a tracking event.

    ``parcel_id`` is optional and is not checked against the parcel store.
    """
    tracking_code: Optional[str] = Field(None, max_length=64)
    parcel_id: Optional[int] = None
    status: ParcelStatus
    message: str = Field("", max_length=1000)
    updated_by: Optional[str] = Field(None, max_length=255, description="Defaults to the caller")


class TrackingEventResponse(BaseModel):
    id: int
    tracking_code: Optional[str]
    parcel_id: Optional[int]
    status: ParcelStatus
    message: str
    updated_by: str
    time: datetime

    class Config:
        from_attributes = True


class TrackingEventCreated(BaseModel):
    success: bool = True
    inserted_id: int
