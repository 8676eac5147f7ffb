from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from database.models import Category
from api.category import crud
from api.category.schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryDetailResponse,
    CategoryListResponse,
)
from auth.dependencies import get_current_claims
from auth.token import AccessTokenClaims
from config.settings import MAX_PAGE_SIZE
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _category_detail(session: Session, category: Category) -> CategoryDetailResponse:
    parent = crud.get_category(session, category.parent_category_id) if category.parent_category_id else None
    return CategoryDetailResponse(
        **CategoryResponse.model_validate(category).model_dump(),
        parent_category=CategoryResponse.model_validate(parent) if parent else None,
        children_categories=[CategoryResponse.model_validate(c) for c in crud.get_children(session, category.id)],
    )


def _get_category_or_404(session: Session, category_id: str) -> Category:
    category = crud.get_category(session, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("", response_model=CategoryListResponse)
def list_categories(
    skip: int = 0,
    limit: int = 100,
    parent_category_id: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """List top-level categories, or the children of parent_category_id."""
    limit = min(limit, MAX_PAGE_SIZE)
    categories = crud.get_categories(session, skip, limit, parent_category_id)
    total = crud.count_categories(session, parent_category_id)
    return CategoryListResponse(categories=categories, total=total)


@router.get("/{category_id}", response_model=CategoryDetailResponse)
def get_category(category_id: str, session: Session = Depends(get_session)):
    """Get a category with its parent and children."""
    return _category_detail(session, _get_category_or_404(session, category_id))


@router.post("", response_model=CategoryDetailResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    category = crud.create_category(session, data, created_by_id=claims.user_id)
    logger.info(f"Category {category.name} created by user {claims.user_id}")
    return _category_detail(session, category)


@router.put("/{category_id}", response_model=CategoryDetailResponse)
def update_category(
    category_id: str,
    data: CategoryUpdate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    category = _get_category_or_404(session, category_id)
    category = crud.update_category(session, category, data, updated_by_id=claims.user_id)
    return _category_detail(session, category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    """Soft delete a category. Categories with children are refused."""
    category = _get_category_or_404(session, category_id)
    crud.delete_category(session, category)
    logger.info(f"Category {category.name} deleted by user {claims.user_id}")
