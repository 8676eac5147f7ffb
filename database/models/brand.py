import uuid
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from typing import Optional

from database.models.soft_delete import unique_while_active
from utils.dates import utc_now


class Brand(SQLModel, table=True):
    __tablename__ = "brands"
    __table_args__ = (unique_while_active("uq_brands_name_active", "name"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(index=True, max_length=100)
    logo: str = Field(max_length=1000)
    created_by_id: Optional[str] = Field(default=None, max_length=36)
    updated_by_id: Optional[str] = Field(default=None, max_length=36)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    deleted_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime(timezone=True))
