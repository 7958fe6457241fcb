import logging
from datetime import date
from typing import Iterable, List, Optional, Set
from uuid import UUID

from sqlalchemy import func, insert, or_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ..core.exceptions import PersistError
from ..enum.rental_enum import EXTERNAL_PLATFORM_ROLES
from ..helpers.platform_helper import is_external_platform
from ..helpers.pricing_helper import default_commission, derive_booking_figures
from ..models.bookings import Booking
from ..models.platforms import Platform
from ..models.properties import Property
from ..schemas.bookings_schemas import (
    BookingCreate, BookingUpdate, BookingRequest, BookingListResponse, BookingOut
)

logger = logging.getLogger(__name__)


# ----------------- Calendar sync reads -----------------
def get_manual_bookings(
    db: Session,
    today: date,
    property_ids: Optional[Iterable[UUID]] = None
) -> List[Booking]:
    """Bookings not sourced from an iCal platform whose checkout is today or later."""
    external_roles = [role.value for role in EXTERNAL_PLATFORM_ROLES]
    query = (
        db.query(Booking)
        .join(Platform, Booking.platform_id == Platform.id)
        .options(joinedload(Booking.platform), joinedload(Booking.property))
        .filter(
            Booking.check_out >= today,
            or_(Platform.role.is_(None), Platform.role.notin_(external_roles))
        )
    )
    if property_ids is not None:
        query = query.filter(Booking.property_id.in_(list(property_ids)))

    # role-less platforms are resolved by name after loading
    return [
        booking for booking in query.order_by(Booking.check_in.asc()).all()
        if not is_external_platform(booking.platform)
    ]


def get_existing_ical_uids(db: Session) -> Set[str]:
    rows = db.query(Booking.ical_uid).filter(Booking.ical_uid.isnot(None)).all()
    return {row.ical_uid for row in rows}


def _insert_ignoring_duplicate_uids(db: Session):
    table = Booking.__table__
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(table).on_conflict_do_nothing(index_elements=["ical_uid"])
    if dialect == "sqlite":
        return sqlite_insert(table).on_conflict_do_nothing(index_elements=["ical_uid"])
    return insert(table)


def insert_external_bookings(db: Session, rows: List[dict]) -> int:
    """
    Insert feed bookings as one batch. Rows whose ical_uid already exists are
    skipped; returns the number of rows actually written.
    """
    if not rows:
        return 0
    try:
        # single multi-row VALUES statement so rowcount excludes skipped rows
        result = db.execute(_insert_ignoring_duplicate_uids(db).values(rows))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistError(f"Batch insert of {len(rows)} bookings failed: {e}") from e
    return result.rowcount


# ----------------- Build Filters -----------------
def build_booking_filters(params: BookingRequest):
    filters = []

    if params.property_id:
        filters.append(Booking.property_id == params.property_id)

    if params.platform_id:
        filters.append(Booking.platform_id == params.platform_id)

    if params.check_in_from:
        filters.append(Booking.check_in >= params.check_in_from)

    if params.check_in_to:
        filters.append(Booking.check_in <= params.check_in_to)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(
            or_(
                Booking.notes.ilike(search_term),
                Booking.ical_uid.ilike(search_term),
            )
        )
    return filters


# ----------------- Get All Bookings -----------------
def get_bookings(db: Session, params: BookingRequest) -> BookingListResponse:
    base_query = db.query(Booking).filter(*build_booking_filters(params))
    total = base_query.with_entities(func.count(Booking.id)).scalar()

    bookings = (
        base_query
        .order_by(Booking.check_in.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )

    results = [BookingOut.model_validate(booking) for booking in bookings]
    return {"bookings": results, "total": total}


# ----------------- Get Single Booking -----------------
def get_booking(db: Session, booking_id: UUID) -> Optional[Booking]:
    return db.query(Booking).filter(Booking.id == booking_id).first()


def _get_platform_or_404(db: Session, platform_id: UUID) -> Platform:
    platform = db.query(Platform).filter(Platform.id == platform_id).first()
    if not platform:
        return error_response(
            message="Platform not found",
            status_code=AppStatusCode.NOT_FOUND,
            http_status=404
        )
    return platform


def _ensure_property_exists(db: Session, property_id: UUID):
    exists = db.query(Property.id).filter(
        Property.id == property_id,
        Property.is_deleted == False
    ).first()
    if not exists:
        error_response(
            message="Property not found",
            status_code=AppStatusCode.NOT_FOUND,
            http_status=404
        )


def _apply_figures(db_booking: Booking):
    figures = derive_booking_figures(
        db_booking.check_in,
        db_booking.check_out,
        db_booking.gross_price,
        db_booking.commission,
        db_booking.request_date,
    )
    db_booking.nights = figures.nights
    db_booking.gross_price = figures.gross_price
    db_booking.commission = figures.commission
    db_booking.net_price = figures.net_price
    db_booking.average_daily_rate = figures.average_daily_rate
    db_booking.lead_time_days = figures.lead_time_days


# ----------------- Create Booking -----------------
def create_booking(db: Session, booking: BookingCreate) -> Booking:
    _ensure_property_exists(db, booking.property_id)
    platform = _get_platform_or_404(db, booking.platform_id)

    data = booking.model_dump(exclude={"commission"})
    db_booking = Booking(**data)

    if booking.commission:
        db_booking.commission = booking.commission
        db_booking.commission_pinned = True
    else:
        db_booking.commission = default_commission(
            booking.gross_price, platform.commission_percentage)
        db_booking.commission_pinned = False

    _apply_figures(db_booking)
    db.add(db_booking)
    db.commit()
    db.refresh(db_booking)
    return db_booking


# ----------------- Update Booking -----------------
def update_booking(db: Session, booking_update: BookingUpdate) -> Optional[Booking]:
    db_booking = get_booking(db, booking_update.id)
    if not db_booking:
        return None

    update_data = booking_update.model_dump(exclude_unset=True, exclude={"id"})
    commission_reset = "commission" in update_data
    new_commission = update_data.pop("commission", None)

    platform_changed = (
        "platform_id" in update_data
        and update_data["platform_id"] != db_booking.platform_id
    )
    if "property_id" in update_data:
        _ensure_property_exists(db, update_data["property_id"])
    if platform_changed:
        _get_platform_or_404(db, update_data["platform_id"])

    for key, value in update_data.items():
        setattr(db_booking, key, value)

    if db_booking.check_out <= db_booking.check_in:
        error_response(
            message="check_out must be after check_in",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=422
        )

    if new_commission:
        db_booking.commission = new_commission
        db_booking.commission_pinned = True
    elif commission_reset or platform_changed or not db_booking.commission_pinned:
        # a platform switch or an explicit 0 drops a manual override
        platform = _get_platform_or_404(db, db_booking.platform_id)
        db_booking.commission = default_commission(
            db_booking.gross_price, platform.commission_percentage)
        db_booking.commission_pinned = False

    _apply_figures(db_booking)
    db.commit()
    db.refresh(db_booking)
    return db_booking


# ----------------- Delete Booking -----------------
def delete_booking(db: Session, booking_id: UUID) -> bool:
    db_booking = get_booking(db, booking_id)
    if not db_booking:
        return False

    db.delete(db_booking)
    db.commit()
    logger.info("Deleted booking %s", booking_id)
    return True
