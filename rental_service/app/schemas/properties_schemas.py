from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ..enum.rental_enum import PlatformRole


# ----------------- Property -----------------
class PropertyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    ical_airbnb_url: Optional[str] = None
    ical_booking_url: Optional[str] = None


class PropertyCreate(PropertyBase):
    pass


class PropertyUpdate(BaseModel):
    id: UUID
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    ical_airbnb_url: Optional[str] = None
    ical_booking_url: Optional[str] = None


class PropertyOut(PropertyBase):
    id: UUID
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ----------------- Platform -----------------
class PlatformCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    commission_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    # fixed once created; decides whether bookings arrive by feed
    role: PlatformRole = PlatformRole.manual


class PlatformUpdate(BaseModel):
    id: UUID
    name: Optional[str] = Field(None, min_length=1, max_length=64)
    commission_percentage: Optional[Decimal] = Field(None, ge=0, le=100)


class PlatformOut(BaseModel):
    id: UUID
    name: str
    commission_percentage: Decimal
    role: Optional[str] = None

    model_config = {"from_attributes": True}
