from pydantic import BaseModel
from typing import Generic, Optional, TypeVar, Union
from uuid import UUID

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: str
    session_id: str
    name: Optional[str] = None
    account_type: str = "owner"
    exp: Optional[int] = None


class CommonQueryParams(BaseModel):
    search: Optional[str] = None
    skip: Optional[int] = 0
    limit: Optional[int] = None


class Lookup(BaseModel):
    id: Union[str, UUID]  # accepts both UUID and str
    name: str

    class Config:
        from_attributes = True


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str
