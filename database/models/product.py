import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, JSON
from typing import List, Optional

from utils.dates import utc_now


class Product(SQLModel, table=True):
    """A product and the variant dimensions its SKUs are generated from."""
    __tablename__ = "products"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(index=True, max_length=255)
    base_price: float = Field(default=0)
    virtual_price: float = Field(default=0)
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    brand_id: Optional[str] = Field(default=None, foreign_key="brands.id", index=True)
    category_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    # [{"value": "Color", "options": ["Red", "Blue"]}, ...] in declaration order
    variants: List[dict] = Field(default_factory=list, sa_column=Column(JSON))

    published_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_by_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    deleted_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime(timezone=True))


class SKU(SQLModel, table=True):
    """One concrete combination of variant options."""
    __tablename__ = "skus"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    value: str = Field(max_length=500)  # Options joined with "-" in dimension order
    price: float = Field(default=0)
    stock: int = Field(default=0)
    image: str = Field(default="", max_length=1000)
    product_id: str = Field(foreign_key="products.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    deleted_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime(timezone=True))
