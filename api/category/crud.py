from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlmodel import Session, select

from database.models import Category
from api.category.schemas import CategoryCreate, CategoryUpdate
from utils.dates import utc_now


def _active():
    return Category.deleted_at.is_(None)


def get_category(session: Session, category_id: str) -> Optional[Category]:
    """Get an active category by ID."""
    return session.exec(select(Category).where(Category.id == category_id, _active())).first()


def get_categories_by_ids(session: Session, category_ids: list[str]) -> list[Category]:
    if not category_ids:
        return []
    return list(session.exec(
        select(Category).where(Category.id.in_(category_ids), _active())
    ).all())


def _parent_filter(query, parent_category_id: Optional[str]):
    # Without a parent filter only top-level categories are listed
    if parent_category_id:
        return query.where(Category.parent_category_id == parent_category_id)
    return query.where(Category.parent_category_id.is_(None))


def get_categories(
    session: Session,
    skip: int = 0,
    limit: int = 100,
    parent_category_id: Optional[str] = None,
) -> list[Category]:
    query = _parent_filter(select(Category).where(_active()), parent_category_id)
    return list(session.exec(query.order_by(Category.name).offset(skip).limit(limit)).all())


def count_categories(session: Session, parent_category_id: Optional[str] = None) -> int:
    query = select(func.count()).select_from(Category).where(_active())
    return session.exec(_parent_filter(query, parent_category_id)).one()


def get_children(session: Session, category_id: str) -> list[Category]:
    return list(session.exec(
        select(Category)
        .where(Category.parent_category_id == category_id, _active())
        .order_by(Category.name)
    ).all())


def _ensure_valid_parent(session: Session, parent_category_id: str, category_id: Optional[str] = None):
    """The parent must exist and must not be the category itself or one of its descendants."""
    parent = get_category(session, parent_category_id)
    if not parent:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Parent category not found.",
        )

    seen = set()
    while parent is not None and parent.id not in seen:
        if parent.id == category_id:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="A category cannot be nested under itself.",
            )
        seen.add(parent.id)
        parent = get_category(session, parent.parent_category_id) if parent.parent_category_id else None


def create_category(session: Session, data: CategoryCreate, created_by_id: Optional[str] = None) -> Category:
    if data.parent_category_id:
        _ensure_valid_parent(session, data.parent_category_id)

    category = Category(
        name=data.name.strip(),
        logo=data.logo,
        parent_category_id=data.parent_category_id,
        created_by_id=created_by_id,
    )
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def update_category(
    session: Session,
    category: Category,
    data: CategoryUpdate,
    updated_by_id: Optional[str] = None,
) -> Category:
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("parent_category_id"):
        _ensure_valid_parent(session, update_data["parent_category_id"], category_id=category.id)

    for key, value in update_data.items():
        if value is None and key != "parent_category_id":
            continue
        setattr(category, key, value.strip() if key == "name" else value)

    category.updated_by_id = updated_by_id
    category.updated_at = utc_now()
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def delete_category(session: Session, category: Category) -> None:
    """Soft delete a category that has no active children."""
    if get_children(session, category.id):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Category has child categories.",
        )
    category.deleted_at = utc_now()
    session.add(category)
    session.commit()
