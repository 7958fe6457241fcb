from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel

from shared.core.schemas import Lookup
from ..enum.rental_enum import OccupancySource
from .properties_schemas import PropertyOut


# ----------------- Feed -----------------
class RawOccurrence(BaseModel):
    uid: Optional[str] = None
    start: date
    end: date
    # CREATED, or DTSTAMP when the feed omits CREATED
    created: Optional[date] = None


class ExternalOccupancy(BaseModel):
    uid: str
    property_id: Optional[UUID] = None
    property_name: str
    source: OccupancySource
    start: date
    end: date
    created: Optional[date] = None


# ----------------- Timeline -----------------
class Occupancy(BaseModel):
    id: str
    title: str
    property_id: Optional[UUID] = None
    property_name: str
    source: OccupancySource
    start: date
    end: date
    platform_id: Optional[UUID] = None
    platform_name: Optional[str] = None
    net_price: Optional[Decimal] = None
    is_free_marker: bool = False

    def covers(self, day: date) -> bool:
        return self.start <= day < self.end


class OccupancyConflict(BaseModel):
    property_name: str
    first: Occupancy
    second: Occupancy


# ----------------- Responses -----------------
class CalendarSyncResult(BaseModel):
    occupancies: List[Occupancy]
    logs: List[str]
    properties: List[PropertyOut]
    conflicts: List[OccupancyConflict] = []
    new_bookings: int = 0
    persist_failed: bool = False


class AvailabilityResponse(BaseModel):
    day: date
    properties: List[Lookup]


class OccupiedResponse(BaseModel):
    property_id: UUID
    day: date
    occupied: bool
