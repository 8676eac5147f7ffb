from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from database.models.permission import HTTPMethod


class PermissionCreate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)
    path: str = Field(min_length=1, max_length=255, pattern=r"^/")
    method: HTTPMethod


class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)
    path: Optional[str] = Field(default=None, min_length=1, max_length=255, pattern=r"^/")
    method: Optional[HTTPMethod] = None


class PermissionResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    path: str
    method: str
    module: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PermissionListResponse(BaseModel):
    permissions: list[PermissionResponse]
    total: int


class PermissionSyncResponse(BaseModel):
    added: int
    deleted: int
    total: int
