import uuid
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from typing import Optional
from enum import Enum

from database.models.soft_delete import unique_while_active
from utils.dates import utc_now


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class Permission(SQLModel, table=True):
    __tablename__ = "permissions"
    __table_args__ = (unique_while_active("uq_permissions_route_active", "path", "method"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(max_length=255)  # e.g. "POST /manage-product/products"
    description: Optional[str] = Field(default=None, max_length=500)
    path: str = Field(index=True, max_length=255)  # Route template, e.g. "/roles/{role_id}"
    method: str = Field(index=True, max_length=10)
    module: str = Field(index=True, max_length=100)  # First path segment, upper-cased
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    deleted_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime(timezone=True))  # Soft delete marker


class RolePermission(SQLModel, table=True):
    __tablename__ = "role_permissions"

    role_id: str = Field(foreign_key="roles.id", primary_key=True)
    permission_id: str = Field(foreign_key="permissions.id", primary_key=True)
