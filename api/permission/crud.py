from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlmodel import Session, select

from database.connection import commit_or_conflict
from database.models import Permission
from api.permission.schemas import PermissionCreate, PermissionUpdate
from core.permissions import derive_module, permission_name, permission_key
from utils.dates import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)

PERMISSION_EXISTS = "Permission already exists."


def _active():
    return Permission.deleted_at.is_(None)


def get_permission(session: Session, permission_id: str) -> Optional[Permission]:
    """Get an active permission by ID."""
    return session.exec(
        select(Permission).where(Permission.id == permission_id, _active())
    ).first()


def get_permission_by_route(
    session: Session,
    path: str,
    method: str,
    exclude_id: Optional[str] = None,
) -> Optional[Permission]:
    """Get the active permission for an exact (path, method) pair."""
    query = select(Permission).where(
        Permission.path == path,
        Permission.method == method.upper(),
        _active(),
    )
    if exclude_id:
        query = query.where(Permission.id != exclude_id)
    return session.exec(query).first()


def get_permissions(
    session: Session,
    skip: int = 0,
    limit: int = 100,
    module: Optional[str] = None,
) -> list[Permission]:
    """Get active permissions with pagination, optionally for one module."""
    query = select(Permission).where(_active())
    if module:
        query = query.where(Permission.module == module.upper())
    return list(session.exec(
        query.order_by(Permission.module, Permission.path, Permission.method).offset(skip).limit(limit)
    ).all())


def count_permissions(session: Session, module: Optional[str] = None) -> int:
    """Count active permissions."""
    query = select(func.count()).select_from(Permission).where(_active())
    if module:
        query = query.where(Permission.module == module.upper())
    return session.exec(query).one()


def get_active_permissions_by_ids(session: Session, permission_ids: list[str]) -> list[Permission]:
    """Resolve permission ids, raising 422 when any is unknown or deleted."""
    unique_ids = list(dict.fromkeys(permission_ids))
    if not unique_ids:
        return []

    permissions = list(session.exec(
        select(Permission).where(Permission.id.in_(unique_ids), _active())
    ).all())

    missing = set(unique_ids) - {p.id for p in permissions}
    if missing:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Permissions not found: {', '.join(sorted(missing))}",
        )
    return permissions


def _ensure_route_is_free(session: Session, path: str, method: str, exclude_id: Optional[str] = None):
    if get_permission_by_route(session, path, method, exclude_id=exclude_id):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=PERMISSION_EXISTS,
        )


def create_permission(session: Session, data: PermissionCreate) -> Permission:
    """Create a permission; module is derived from the path."""
    method = data.method.value
    _ensure_route_is_free(session, data.path, method)

    permission = Permission(
        name=data.name or permission_name(method, data.path),
        description=data.description,
        path=data.path,
        method=method,
        module=derive_module(data.path),
    )
    with commit_or_conflict(session, PERMISSION_EXISTS):
        session.add(permission)
    session.refresh(permission)
    return permission


def update_permission(session: Session, permission: Permission, data: PermissionUpdate) -> Permission:
    """Update permission details, keeping (path, method) unique and module in sync."""
    update_data = data.model_dump(exclude_unset=True)
    path = update_data.get("path") or permission.path
    method = update_data.get("method") or permission.method
    method = method.value if hasattr(method, "value") else method

    if path != permission.path or method != permission.method:
        _ensure_route_is_free(session, path, method, exclude_id=permission.id)

    for key, value in update_data.items():
        if key in ("path", "method") or value is None:
            continue
        setattr(permission, key, value)

    permission.path = path
    permission.method = method
    permission.module = derive_module(path)
    permission.updated_at = utc_now()
    with commit_or_conflict(session, PERMISSION_EXISTS):
        session.add(permission)
    session.refresh(permission)
    return permission


def delete_permission(session: Session, permission: Permission) -> None:
    """Soft delete a permission; it stops matching authorization checks immediately."""
    permission.deleted_at = utc_now()
    session.add(permission)
    session.commit()


def sync_permissions(session: Session, route_permissions: list[dict]) -> tuple[int, int]:
    """Make active permissions mirror the app's registered routes.

    Stale permissions are soft-deleted, missing routes are added.

    Returns:
        Tuple of (added, deleted)
    """
    if not route_permissions:
        # An empty route list never wipes the table
        logger.error("Permission sync skipped: no routes were collected")
        return 0, 0

    existing = list(session.exec(select(Permission).where(_active())).all())
    existing_keys = {permission_key(p.method, p.path) for p in existing}
    route_keys = {permission_key(r["method"], r["path"]) for r in route_permissions}

    now = utc_now()
    deleted = 0
    for permission in existing:
        if permission_key(permission.method, permission.path) not in route_keys:
            permission.deleted_at = now
            session.add(permission)
            deleted += 1

    added = 0
    for route in route_permissions:
        key = permission_key(route["method"], route["path"])
        if key in existing_keys:
            continue
        session.add(Permission(**route))
        existing_keys.add(key)
        added += 1

    session.commit()
    logger.info(f"Permission sync: {added} added, {deleted} deleted")
    return added, deleted
