from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_rental_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, success_response
from shared.utils.app_status_code import AppStatusCode
from ..crud import bookings_crud as crud
from ..schemas.bookings_schemas import (
    BookingCreate,
    BookingUpdate,
    BookingOut,
    BookingRequest,
    BookingListResponse,
)

router = APIRouter(prefix="/api/bookings", tags=["Booking Ledger"])


# ---------------- List Bookings ----------------
@router.get("/all", response_model=BookingListResponse)
def get_bookings_endpoint(
    params: BookingRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_bookings(db, params)


# ---------------- Get Booking ----------------
@router.get("/{booking_id}", response_model=BookingOut)
def get_booking_endpoint(
    booking_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    booking = crud.get_booking(db, booking_id)
    if not booking:
        return error_response(
            message="Booking not found",
            status_code=AppStatusCode.NOT_FOUND,
            http_status=404
        )
    return booking


# ----------------- Create Booking -----------------
@router.post("/", response_model=BookingOut)
def create_booking_route(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_booking(db, booking)


# ----------------- Update Booking -----------------
@router.put("/", response_model=BookingOut)
def update_booking_route(
    booking_update: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    booking = crud.update_booking(db, booking_update)
    if not booking:
        return error_response(
            message="Booking not found",
            status_code=AppStatusCode.NOT_FOUND,
            http_status=404
        )
    return booking


# ---------------- Delete Booking ----------------
@router.delete("/{booking_id}")
def delete_booking_route(
    booking_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    if not crud.delete_booking(db, booking_id):
        return error_response(
            message="Booking not found",
            status_code=AppStatusCode.NOT_FOUND,
            http_status=404
        )
    return success_response(data=None, message="Booking deleted successfully",
                            status_code=AppStatusCode.DELETED_SUCCESSFULLY)
