from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class BrandCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    logo: str = Field(min_length=1, max_length=1000)


class BrandUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    logo: Optional[str] = Field(default=None, min_length=1, max_length=1000)


class BrandResponse(BaseModel):
    id: str
    name: str
    logo: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BrandListResponse(BaseModel):
    brands: list[BrandResponse]
    total: int
