from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from database.connection import get_session
from database.models import Product, RoleName
from api.product import crud
from api.product.schemas import (
    ProductCreate,
    ProductUpdate,
    ProductDetailResponse,
    ProductListResponse,
)
from auth.dependencies import get_current_claims
from auth.token import AccessTokenClaims
from config.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

FORBIDDEN_PRODUCT = "You do not have permission to interact with this product."


def _is_admin(claims: AccessTokenClaims) -> bool:
    return claims.role_name == RoleName.ADMIN.value


def _get_owned_product(session: Session, product_id: str, claims: AccessTokenClaims) -> Product:
    """Load a product the caller may manage. Admins manage every product."""
    product = crud.get_product(session, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    if not _is_admin(claims) and product.created_by_id != claims.user_id:
        raise HTTPException(status_code=403, detail=FORBIDDEN_PRODUCT)

    return product


@router.get("", response_model=ProductListResponse)
def list_managed_products(
    name: Optional[str] = None,
    brand_ids: Optional[list[str]] = Query(default=None),
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    created_by_id: Optional[str] = None,
    skip: int = 0,
    limit: int = DEFAULT_PAGE_SIZE,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    """List products including unpublished ones. Non-admins only see their own."""
    if not _is_admin(claims):
        if created_by_id and created_by_id != claims.user_id:
            raise HTTPException(status_code=403, detail=FORBIDDEN_PRODUCT)
        created_by_id = claims.user_id

    limit = min(limit, MAX_PAGE_SIZE)
    filters = dict(
        name=name,
        brand_ids=brand_ids,
        min_price=min_price,
        max_price=max_price,
        created_by_id=created_by_id,
    )
    products = crud.get_products(session, skip, limit, **filters)
    total = crud.count_products(session, **filters)
    return ProductListResponse(products=products, total=total)


@router.post("", response_model=ProductDetailResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    """Create a product. Variants and SKUs are validated by the request model."""
    product = crud.create_product(session, data, created_by_id=claims.user_id)
    logger.info(f"Product {product.id} created by user {claims.user_id} with {len(data.skus)} SKUs")
    return crud.get_product_with_skus(session, product)


@router.get("/{product_id}", response_model=ProductDetailResponse)
def get_managed_product(
    product_id: str,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    product = _get_owned_product(session, product_id, claims)
    return crud.get_product_with_skus(session, product)


@router.put("/{product_id}", response_model=ProductDetailResponse)
def update_product(
    product_id: str,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    """Update a product and replace its SKU set."""
    product = _get_owned_product(session, product_id, claims)
    product = crud.update_product(session, product, data)
    logger.info(f"Product {product.id} updated by user {claims.user_id}")
    return crud.get_product_with_skus(session, product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    """Soft delete a product and its SKUs."""
    product = _get_owned_product(session, product_id, claims)
    crud.delete_product(session, product)
    logger.info(f"Product {product_id} deleted by user {claims.user_id}")
