from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ..models.platforms import Platform
from ..schemas.properties_schemas import PlatformCreate, PlatformUpdate


def get_platforms(db: Session) -> List[Platform]:
    return db.query(Platform).order_by(Platform.name.asc()).all()


def get_platform(db: Session, platform_id: UUID) -> Optional[Platform]:
    return db.query(Platform).filter(Platform.id == platform_id).first()


def platform_lookup(db: Session) -> List[Lookup]:
    return [Lookup(id=p.id, name=p.name) for p in get_platforms(db)]


def _ensure_name_available(db: Session, name: str, exclude_id: Optional[UUID] = None):
    query = db.query(Platform.id).filter(Platform.name == name)
    if exclude_id:
        query = query.filter(Platform.id != exclude_id)
    if query.first():
        error_response(
            message=f"Platform with name '{name}' already exists",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=400
        )


# ----------------- Create Platform -----------------
def create_platform(db: Session, platform: PlatformCreate) -> Platform:
    name = platform.name.strip()
    _ensure_name_available(db, name)

    db_platform = Platform(
        name=name,
        commission_percentage=platform.commission_percentage,
        role=platform.role.value,
    )
    db.add(db_platform)
    db.commit()
    db.refresh(db_platform)
    return db_platform


# ----------------- Update Platform -----------------
def update_platform(db: Session, platform: PlatformUpdate) -> Optional[Platform]:
    """Rename or re-price a platform. The role cannot change after creation."""
    db_platform = get_platform(db, platform.id)
    if not db_platform:
        return None

    update_data = platform.model_dump(exclude_unset=True, exclude={"id"})
    if update_data.get("name") is not None:
        update_data["name"] = update_data["name"].strip()
        _ensure_name_available(db, update_data["name"], exclude_id=db_platform.id)

    for key, value in update_data.items():
        if value is not None:
            setattr(db_platform, key, value)

    db.commit()
    db.refresh(db_platform)
    return db_platform
