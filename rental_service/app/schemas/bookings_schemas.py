from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from typing import List, Optional
from pydantic import BaseModel, model_validator
from shared.core.schemas import CommonQueryParams


# ----------------- Base -----------------
class BookingBase(BaseModel):
    property_id: UUID
    platform_id: UUID
    check_in: date
    check_out: date
    gross_price: Decimal = Decimal("0")
    # None or 0 means "use the platform commission percentage"
    commission: Optional[Decimal] = None
    request_date: Optional[date] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


# ----------------- Create -----------------
class BookingCreate(BookingBase):

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


# ----------------- Update -----------------
NON_NULLABLE_UPDATE_FIELDS = ("property_id", "platform_id", "check_in", "check_out", "gross_price")


class BookingUpdate(BaseModel):
    id: UUID
    property_id: Optional[UUID] = None
    platform_id: Optional[UUID] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    gross_price: Optional[Decimal] = None
    commission: Optional[Decimal] = None
    request_date: Optional[date] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        # fields may be omitted, but not cleared
        for field in NON_NULLABLE_UPDATE_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


# ----------------- Out -----------------
class BookingOut(BaseModel):
    id: UUID
    property_id: UUID
    platform_id: UUID
    check_in: date
    check_out: date
    nights: int
    gross_price: Decimal
    commission: Decimal
    commission_pinned: bool
    net_price: Decimal
    average_daily_rate: Decimal
    request_date: Optional[date] = None
    lead_time_days: Optional[int] = None
    ical_uid: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ----------------- Request -----------------
class BookingRequest(CommonQueryParams):
    property_id: Optional[UUID] = None
    platform_id: Optional[UUID] = None
    check_in_from: Optional[date] = None
    check_in_to: Optional[date] = None


# ----------------- List Response -----------------
class BookingListResponse(BaseModel):
    bookings: List[BookingOut]
    total: int

    model_config = {"from_attributes": True}
