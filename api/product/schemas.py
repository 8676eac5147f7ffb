from pydantic import BaseModel, Field, StringConstraints, model_validator
from datetime import datetime
from typing import Annotated, Optional

from core.skus import VariantDimension, ensure_valid_product_variants


# Surrounding whitespace is dropped before the length check, so "  " is rejected
VariantText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class VariantRequest(BaseModel):
    value: VariantText  # Dimension name, e.g. "Color"
    options: list[VariantText] = Field(min_length=1)

    def to_dimension(self) -> VariantDimension:
        return VariantDimension(name=self.value, options=list(self.options))


class SKURequest(BaseModel):
    value: str = Field(min_length=1, max_length=500)
    price: float = Field(ge=0)
    stock: int = Field(ge=0)
    image: str = Field(default="", max_length=1000)


class VariantsAndSKUsMixin(BaseModel):
    variants: list[VariantRequest] = Field(min_length=1)
    skus: list[SKURequest] = Field(min_length=1)

    @model_validator(mode="after")
    def check_skus_match_variants(self):
        # Raises SKUValidationError (a ValueError), reported as field-level 422 errors
        ensure_valid_product_variants(self.skus, [v.to_dimension() for v in self.variants])
        return self


class ProductCreate(VariantsAndSKUsMixin):
    published_at: Optional[datetime] = None
    name: str = Field(min_length=1, max_length=255)
    base_price: float = Field(ge=0)
    virtual_price: float = Field(ge=0)
    images: list[str] = Field(min_length=1, max_length=10)
    brand_id: Optional[str] = None
    category_ids: list[str] = Field(default_factory=list)


class ProductUpdate(VariantsAndSKUsMixin):
    """Variants and SKUs are always resubmitted together; other fields are optional."""
    published_at: Optional[datetime] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    base_price: Optional[float] = Field(default=None, ge=0)
    virtual_price: Optional[float] = Field(default=None, ge=0)
    images: Optional[list[str]] = Field(default=None, min_length=1, max_length=10)
    brand_id: Optional[str] = None
    category_ids: Optional[list[str]] = None


class VariantResponse(BaseModel):
    value: str
    options: list[str]


class SKUResponse(BaseModel):
    id: str
    value: str
    price: float
    stock: int
    image: str

    class Config:
        from_attributes = True


class ProductResponse(BaseModel):
    id: str
    name: str
    base_price: float
    virtual_price: float
    images: list[str]
    brand_id: Optional[str]
    category_ids: list[str]
    variants: list[VariantResponse]
    published_at: Optional[datetime]
    created_by_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductDetailResponse(ProductResponse):
    skus: list[SKUResponse]


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int
