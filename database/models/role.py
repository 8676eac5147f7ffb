import uuid
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from typing import Optional
from enum import Enum

from database.models.soft_delete import unique_while_active
from utils.dates import utc_now


class RoleName(str, Enum):
    ADMIN = "admin"      # Full system access
    CLIENT = "client"    # Default role for self-registered shoppers
    SELLER = "seller"    # Manages own products


# Roles the management endpoints refuse to modify or delete
PROTECTED_ROLES = [RoleName.ADMIN.value, RoleName.CLIENT.value, RoleName.SELLER.value]


class Role(SQLModel, table=True):
    __tablename__ = "roles"
    __table_args__ = (unique_while_active("uq_roles_name_active", "name"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(index=True, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = Field(default=True)
    created_by_id: Optional[str] = Field(default=None, max_length=36)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    deleted_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime(timezone=True))  # Soft delete marker
