from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    logo: Optional[str] = Field(default=None, max_length=1000)
    parent_category_id: Optional[str] = None


class CategoryUpdate(BaseModel):
    """parent_category_id set to null moves the category to the top level."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    logo: Optional[str] = Field(default=None, max_length=1000)
    parent_category_id: Optional[str] = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    logo: Optional[str]
    parent_category_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CategoryDetailResponse(CategoryResponse):
    parent_category: Optional[CategoryResponse]
    children_categories: list[CategoryResponse]


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]
    total: int
