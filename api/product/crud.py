from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlmodel import Session, select

from database.models import Product, SKU
from api.brand.crud import get_brand
from api.category.crud import get_categories_by_ids
from api.product.schemas import ProductCreate, ProductUpdate, SKURequest
from core.skus import normalize
from utils.dates import as_utc, utc_now


def _active():
    return Product.deleted_at.is_(None)


def _filtered_query(
    query,
    name: Optional[str] = None,
    brand_ids: Optional[list[str]] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    created_by_id: Optional[str] = None,
    published_only: bool = False,
):
    query = query.where(_active())
    if name:
        query = query.where(Product.name.ilike(f"%{name}%"))
    if brand_ids:
        query = query.where(Product.brand_id.in_(brand_ids))
    if min_price is not None:
        query = query.where(Product.base_price >= min_price)
    if max_price is not None:
        query = query.where(Product.base_price <= max_price)
    if created_by_id:
        query = query.where(Product.created_by_id == created_by_id)
    if published_only:
        query = query.where(
            Product.published_at.is_not(None),
            Product.published_at <= utc_now(),
        )
    return query


def get_products(session: Session, skip: int = 0, limit: int = 100, **filters) -> list[Product]:
    """Get active products matching the filters, newest first."""
    query = _filtered_query(select(Product), **filters)
    return list(session.exec(
        query.order_by(Product.created_at.desc()).offset(skip).limit(limit)
    ).all())


def count_products(session: Session, **filters) -> int:
    """Count active products matching the filters."""
    query = _filtered_query(select(func.count()).select_from(Product), **filters)
    return session.exec(query).one()


def get_product(session: Session, product_id: str, published_only: bool = False) -> Optional[Product]:
    """Get an active product by ID."""
    query = _filtered_query(select(Product).where(Product.id == product_id), published_only=published_only)
    return session.exec(query).first()


def get_product_skus(session: Session, product_id: str) -> list[SKU]:
    """Get the active SKUs of a product."""
    return list(session.exec(
        select(SKU)
        .where(SKU.product_id == product_id, SKU.deleted_at.is_(None))
        .order_by(SKU.created_at, SKU.value)
    ).all())


def _new_sku(product_id: str, data: SKURequest) -> SKU:
    return SKU(
        value=data.value.strip(),
        price=data.price,
        stock=data.stock,
        image=data.image,
        product_id=product_id,
    )


def _ensure_catalog_references(
    session: Session,
    brand_id: Optional[str] = None,
    category_ids: Optional[list[str]] = None,
) -> None:
    """Brand and categories must exist and not be soft-deleted."""
    if brand_id and not get_brand(session, brand_id):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Brand not found.",
        )

    if category_ids:
        found = {category.id for category in get_categories_by_ids(session, category_ids)}
        missing = [category_id for category_id in dict.fromkeys(category_ids) if category_id not in found]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Categories not found: {', '.join(missing)}.",
            )


def create_product(session: Session, data: ProductCreate, created_by_id: str) -> Product:
    """Create a product with its (already validated) SKUs."""
    _ensure_catalog_references(session, data.brand_id, data.category_ids)

    product = Product(
        name=data.name,
        base_price=data.base_price,
        virtual_price=data.virtual_price,
        images=list(data.images),
        brand_id=data.brand_id,
        category_ids=list(data.category_ids),
        variants=[v.model_dump() for v in data.variants],
        published_at=as_utc(data.published_at),
        created_by_id=created_by_id,
    )
    session.add(product)
    session.flush()

    for sku in data.skus:
        session.add(_new_sku(product.id, sku))

    session.commit()
    session.refresh(product)
    return product


def update_product(session: Session, product: Product, data: ProductUpdate) -> Product:
    """Update a product and upsert its SKUs by value.

    SKUs whose value is still submitted are updated in place, new values are
    created and values no longer generated by the variants are soft-deleted.
    """
    update_data = data.model_dump(exclude_unset=True, exclude={"variants", "skus"})
    _ensure_catalog_references(session, update_data.get("brand_id"), update_data.get("category_ids"))

    for key, value in update_data.items():
        if value is None and key not in ("published_at", "brand_id"):
            continue
        setattr(product, key, as_utc(value) if key == "published_at" else value)

    now = utc_now()
    product.variants = [v.model_dump() for v in data.variants]
    product.updated_at = now

    existing = {normalize(sku.value): sku for sku in get_product_skus(session, product.id)}
    submitted = {normalize(sku.value): sku for sku in data.skus}

    for key, sku in existing.items():
        if key not in submitted:
            sku.deleted_at = now
            session.add(sku)

    for key, sku_data in submitted.items():
        sku = existing.get(key)
        if sku is None:
            session.add(_new_sku(product.id, sku_data))
            continue
        sku.value = sku_data.value.strip()
        sku.price = sku_data.price
        sku.stock = sku_data.stock
        sku.image = sku_data.image
        sku.updated_at = now
        session.add(sku)

    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def delete_product(session: Session, product: Product) -> None:
    """Soft delete a product together with its SKUs."""
    now = utc_now()
    for sku in get_product_skus(session, product.id):
        sku.deleted_at = now
        session.add(sku)
    product.deleted_at = now
    session.add(product)
    session.commit()


def get_product_with_skus(session: Session, product: Product) -> dict:
    """Product fields plus its active SKUs."""
    return {
        **product.model_dump(exclude={"deleted_at"}),
        "skus": get_product_skus(session, product.id),
    }
