from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_rental_db as get_db
from shared.core.schemas import UserToken
from ..schemas.calendar_schemas import AvailabilityResponse, CalendarSyncResult, OccupiedResponse
from ..services import calendar_sync_service as sync_service
from ..services.timeline_service import Timeline

router = APIRouter(prefix="/api/calendar", tags=["Calendar Sync"])


# ---------------- Reconciled calendar ----------------
@router.get("/", response_model=CalendarSyncResult)
def get_calendar_endpoint(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return sync_service.get_reconciled_calendar(db)


# ---------------- Explicitly free properties ----------------
@router.get("/availability", response_model=AvailabilityResponse)
def get_availability_endpoint(
    day: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    day = day or date.today()
    result = sync_service.get_reconciled_calendar(db)
    timeline = Timeline(result.occupancies)
    return {"day": day, "properties": timeline.free_properties_on(day)}


# ---------------- Occupied check ----------------
@router.get("/occupied", response_model=OccupiedResponse)
def get_occupied_endpoint(
    property_id: UUID,
    day: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    day = day or date.today()
    result = sync_service.get_reconciled_calendar(db)
    timeline = Timeline(result.occupancies)
    return {"property_id": property_id, "day": day, "occupied": timeline.is_occupied(property_id, day)}
