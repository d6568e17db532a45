"""
Parcel Pydantic schemas.

Defines request and response models for parcel management.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional, Dict, Any
from backend.app.models.parcel_enums import ParcelStatus, PaymentStatus


class CreatedBy(BaseModel):
    """Creator identity supplied at booking."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None


class CreatorResponse(BaseModel):
    name: Optional[str] = None
    email: str


class ParcelCreate(BaseModel):
    """
    Schema for booking a new parcel.

    ``tracking_code`` and ``created_by.email`` are checked by the parcel store
    so that a missing value is reported as a 400, like any other validation
    failure. Status fields sent by the client are ignored.
    """
    tracking_code: Optional[str] = Field(None, max_length=64, description="Customer-facing tracking code")
    title: Optional[str] = Field(None, max_length=255, description="Parcel title")
    parcel_type: str = Field(..., min_length=1, max_length=50, description="Parcel type, e.g. document")
    weight_kg: Optional[float] = Field(None, gt=0, description="Weight in kilograms")
    fare: float = Field(..., ge=0, description="Declared delivery fare")
    created_by: Optional[CreatedBy] = Field(None, description="Defaults to the caller")
    sender_name: Optional[str] = Field(None, max_length=255)
    sender_region: str = Field(..., min_length=1, max_length=100)
    sender_warehouse: str = Field(..., min_length=1, max_length=100)
    receiver_name: Optional[str] = Field(None, max_length=255)
    receiver_region: str = Field(..., min_length=1, max_length=100)
    receiver_warehouse: str = Field(..., min_length=1, max_length=100)


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    id: int
    tracking_code: str
    title: Optional[str]
    parcel_type: str
    weight_kg: Optional[float]
    fare: float
    created_by: CreatorResponse
    sender_name: Optional[str]
    sender_region: str
    sender_warehouse: str
    receiver_name: Optional[str]
    receiver_region: str
    receiver_warehouse: str
    status: ParcelStatus
    payment_status: PaymentStatus
    payment_info: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime
    delivered_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ParcelStatusUpdate(BaseModel):
    """Schema for the admin status override."""
    status: ParcelStatus
    message: Optional[str] = Field(None, max_length=500, description="Defaults to 'Status updated to <status>'")


class PaymentConfirmation(BaseModel):
    """Schema for confirming a gateway payment against a parcel."""
    payment_intent_id: Optional[str] = Field(None, max_length=255)
    amount: float = Field(..., ge=0)
    payer_email: Optional[EmailStr] = None


class ActionResponse(BaseModel):
    """Schema for state-changing parcel actions."""
    success: bool = True
    message: Optional[str] = None
    parcel: Optional[ParcelResponse] = None
