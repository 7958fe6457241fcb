from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_rental_db as get_db
from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response, success_response
from shared.utils.app_status_code import AppStatusCode
from ..crud import platforms_crud, properties_crud
from ..schemas.properties_schemas import (
    PlatformCreate,
    PlatformOut,
    PlatformUpdate,
    PropertyCreate,
    PropertyOut,
    PropertyUpdate,
)

router = APIRouter(prefix="/api", tags=["Configuration"])


# ---------------- Properties ----------------
@router.get("/properties/", response_model=List[PropertyOut])
def get_properties_endpoint(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return properties_crud.get_properties(db)


@router.get("/properties/lookup", response_model=List[Lookup])
def property_lookup_endpoint(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return properties_crud.property_lookup(db)


@router.post("/properties/", response_model=PropertyOut)
def create_property_endpoint(
    prop: PropertyCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return properties_crud.create_property(db, prop)


@router.put("/properties/", response_model=PropertyOut)
def update_property_endpoint(
    prop: PropertyUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_property = properties_crud.update_property(db, prop)
    if not db_property:
        return error_response(
            message="Property not found",
            status_code=AppStatusCode.NOT_FOUND,
            http_status=404
        )
    return db_property


@router.delete("/properties/{property_id}")
def delete_property_endpoint(
    property_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    if not properties_crud.delete_property(db, property_id):
        return error_response(
            message="Property not found",
            status_code=AppStatusCode.NOT_FOUND,
            http_status=404
        )
    return success_response(data=None, message="Property deleted successfully",
                            status_code=AppStatusCode.DELETED_SUCCESSFULLY)


# ---------------- Platforms ----------------
@router.get("/platforms/", response_model=List[PlatformOut])
def get_platforms_endpoint(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return platforms_crud.get_platforms(db)


@router.get("/platforms/lookup", response_model=List[Lookup])
def platform_lookup_endpoint(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return platforms_crud.platform_lookup(db)


@router.post("/platforms/", response_model=PlatformOut)
def create_platform_endpoint(
    platform: PlatformCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return platforms_crud.create_platform(db, platform)


@router.put("/platforms/", response_model=PlatformOut)
def update_platform_endpoint(
    platform: PlatformUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_platform = platforms_crud.update_platform(db, platform)
    if not db_platform:
        return error_response(
            message="Platform not found",
            status_code=AppStatusCode.NOT_FOUND,
            http_status=404
        )
    return db_platform
