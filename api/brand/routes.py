from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from api.brand import crud
from api.brand.schemas import BrandCreate, BrandUpdate, BrandResponse, BrandListResponse
from auth.dependencies import get_current_claims
from auth.token import AccessTokenClaims
from config.settings import MAX_PAGE_SIZE
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=BrandListResponse)
def list_brands(
    skip: int = 0,
    limit: int = 100,
    name: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """List active brands."""
    limit = min(limit, MAX_PAGE_SIZE)
    brands = crud.get_brands(session, skip, limit, name=name)
    return BrandListResponse(brands=brands, total=crud.count_brands(session, name=name))


@router.get("/{brand_id}", response_model=BrandResponse)
def get_brand(brand_id: str, session: Session = Depends(get_session)):
    brand = crud.get_brand(session, brand_id)
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    return brand


@router.post("", response_model=BrandResponse, status_code=status.HTTP_201_CREATED)
def create_brand(
    data: BrandCreate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    brand = crud.create_brand(session, data, created_by_id=claims.user_id)
    logger.info(f"Brand {brand.name} created by user {claims.user_id}")
    return brand


@router.put("/{brand_id}", response_model=BrandResponse)
def update_brand(
    brand_id: str,
    data: BrandUpdate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    brand = crud.get_brand(session, brand_id)
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    return crud.update_brand(session, brand, data, updated_by_id=claims.user_id)


@router.delete("/{brand_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_brand(
    brand_id: str,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    """Soft delete a brand."""
    brand = crud.get_brand(session, brand_id)
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    crud.delete_brand(session, brand)
    logger.info(f"Brand {brand.name} deleted by user {claims.user_id}")
