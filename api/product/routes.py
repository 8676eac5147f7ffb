from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from database.connection import get_session
from api.product import crud
from api.product.schemas import ProductDetailResponse, ProductListResponse
from config.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter()


@router.get("", response_model=ProductListResponse)
def list_products(
    name: Optional[str] = None,
    brand_ids: Optional[list[str]] = Query(default=None),
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    created_by_id: Optional[str] = None,
    skip: int = 0,
    limit: int = DEFAULT_PAGE_SIZE,
    session: Session = Depends(get_session),
):
    """List published products."""
    limit = min(limit, MAX_PAGE_SIZE)
    filters = dict(
        name=name,
        brand_ids=brand_ids,
        min_price=min_price,
        max_price=max_price,
        created_by_id=created_by_id,
        published_only=True,
    )
    products = crud.get_products(session, skip, limit, **filters)
    total = crud.count_products(session, **filters)
    return ProductListResponse(products=products, total=total)


@router.get("/{product_id}", response_model=ProductDetailResponse)
def get_product(product_id: str, session: Session = Depends(get_session)):
    """Get a published product with its SKUs."""
    product = crud.get_product(session, product_id, published_only=True)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return crud.get_product_with_skus(session, product)
