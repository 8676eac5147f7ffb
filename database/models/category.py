import uuid
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from typing import Optional

from utils.dates import utc_now


class Category(SQLModel, table=True):
    """Product category; categories nest through parent_category_id."""
    __tablename__ = "categories"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(index=True, max_length=255)
    logo: Optional[str] = Field(default=None, max_length=1000)
    parent_category_id: Optional[str] = Field(default=None, foreign_key="categories.id", index=True)
    created_by_id: Optional[str] = Field(default=None, max_length=36)
    updated_by_id: Optional[str] = Field(default=None, max_length=36)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    deleted_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime(timezone=True))
