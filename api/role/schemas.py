from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from api.permission.schemas import PermissionResponse


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    permission_ids: list[str] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None
    permission_ids: Optional[list[str]] = None  # Replaces the whole set when given


class RoleResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RoleDetailResponse(RoleResponse):
    permissions: list[PermissionResponse]


class RoleListResponse(BaseModel):
    roles: list[RoleResponse]
    total: int
