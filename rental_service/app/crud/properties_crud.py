from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ..models.properties import Property
from ..schemas.properties_schemas import PropertyCreate, PropertyUpdate


def get_properties(db: Session) -> List[Property]:
    return (
        db.query(Property)
        .filter(Property.is_deleted == False)
        .order_by(Property.name.asc())
        .all()
    )


def property_lookup(db: Session) -> List[Lookup]:
    return [Lookup(id=p.id, name=p.name) for p in get_properties(db)]


def get_property(db: Session, property_id: UUID) -> Optional[Property]:
    return db.query(Property).filter(
        Property.id == property_id,
        Property.is_deleted == False
    ).first()


def _ensure_name_available(db: Session, name: str, exclude_id: Optional[UUID] = None):
    # names are unique across deleted rows too
    query = db.query(Property.id).filter(Property.name == name)
    if exclude_id:
        query = query.filter(Property.id != exclude_id)
    if query.first():
        error_response(
            message=f"Property with name '{name}' already exists",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=400
        )


def _clean_url(url: Optional[str]) -> Optional[str]:
    return (url or "").strip() or None


# ----------------- Create Property -----------------
def create_property(db: Session, prop: PropertyCreate) -> Property:
    name = prop.name.strip()
    _ensure_name_available(db, name)

    db_property = Property(
        name=name,
        ical_airbnb_url=_clean_url(prop.ical_airbnb_url),
        ical_booking_url=_clean_url(prop.ical_booking_url),
    )
    db.add(db_property)
    db.commit()
    db.refresh(db_property)
    return db_property


# ----------------- Update Property -----------------
def update_property(db: Session, prop: PropertyUpdate) -> Optional[Property]:
    db_property = get_property(db, prop.id)
    if not db_property:
        return None

    update_data = prop.model_dump(exclude_unset=True, exclude={"id"})
    if update_data.get("name") is not None:
        update_data["name"] = update_data["name"].strip()
        _ensure_name_available(db, update_data["name"], exclude_id=db_property.id)
    elif "name" in update_data:
        update_data.pop("name")

    for key in ("ical_airbnb_url", "ical_booking_url"):
        if key in update_data:
            update_data[key] = _clean_url(update_data[key])

    for key, value in update_data.items():
        setattr(db_property, key, value)

    db.commit()
    db.refresh(db_property)
    return db_property


# ----------------- Delete Property -----------------
def delete_property(db: Session, property_id: UUID) -> bool:
    db_property = get_property(db, property_id)
    if not db_property:
        return False

    # soft delete keeps the booking history intact
    db_property.is_deleted = True
    db.commit()
    return True
