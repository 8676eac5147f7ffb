from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlmodel import Session, select

from database.connection import commit_or_conflict
from database.models import Brand
from api.brand.schemas import BrandCreate, BrandUpdate
from utils.dates import utc_now

BRAND_EXISTS = "Brand already exists."


def _active():
    return Brand.deleted_at.is_(None)


def get_brand(session: Session, brand_id: str) -> Optional[Brand]:
    """Get an active brand by ID."""
    return session.exec(select(Brand).where(Brand.id == brand_id, _active())).first()


def get_brand_by_name(session: Session, name: str) -> Optional[Brand]:
    return session.exec(select(Brand).where(Brand.name == name, _active())).first()


def get_brands(session: Session, skip: int = 0, limit: int = 100, name: Optional[str] = None) -> list[Brand]:
    """Get active brands by name, optionally filtered by a name fragment."""
    query = select(Brand).where(_active())
    if name:
        query = query.where(Brand.name.ilike(f"%{name}%"))
    return list(session.exec(query.order_by(Brand.name).offset(skip).limit(limit)).all())


def count_brands(session: Session, name: Optional[str] = None) -> int:
    query = select(func.count()).select_from(Brand).where(_active())
    if name:
        query = query.where(Brand.name.ilike(f"%{name}%"))
    return session.exec(query).one()


def _ensure_name_is_free(session: Session, name: str, exclude_id: Optional[str] = None):
    existing = get_brand_by_name(session, name)
    if existing and existing.id != exclude_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=BRAND_EXISTS,
        )


def create_brand(session: Session, data: BrandCreate, created_by_id: Optional[str] = None) -> Brand:
    name = data.name.strip()
    _ensure_name_is_free(session, name)

    brand = Brand(name=name, logo=data.logo, created_by_id=created_by_id)
    with commit_or_conflict(session, BRAND_EXISTS):
        session.add(brand)
    session.refresh(brand)
    return brand


def update_brand(session: Session, brand: Brand, data: BrandUpdate, updated_by_id: Optional[str] = None) -> Brand:
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("name"):
        update_data["name"] = update_data["name"].strip()
        _ensure_name_is_free(session, update_data["name"], exclude_id=brand.id)

    with commit_or_conflict(session, BRAND_EXISTS):
        for key, value in update_data.items():
            if value is not None:
                setattr(brand, key, value)
        brand.updated_by_id = updated_by_id
        brand.updated_at = utc_now()
        session.add(brand)
    session.refresh(brand)
    return brand


def delete_brand(session: Session, brand: Brand) -> None:
    """Soft delete a brand. Products keep their brand_id."""
    brand.deleted_at = utc_now()
    session.add(brand)
    session.commit()
