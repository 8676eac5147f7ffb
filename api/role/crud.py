from typing import Optional
from sqlalchemy import delete, func
from fastapi import HTTPException, status
from sqlmodel import Session, select

from database.connection import commit_or_conflict
from database.models import Role, RolePermission, PROTECTED_ROLES
from api.permission.crud import get_active_permissions_by_ids
from api.role.schemas import RoleCreate, RoleUpdate
from utils.dates import utc_now

ROLE_EXISTS = "Role already exists."


def _active():
    return Role.deleted_at.is_(None)


def get_role(session: Session, role_id: str) -> Optional[Role]:
    """Get an active role by ID."""
    return session.exec(select(Role).where(Role.id == role_id, _active())).first()


def get_role_by_name(session: Session, name: str) -> Optional[Role]:
    """Get an active role by name."""
    return session.exec(select(Role).where(Role.name == name, _active())).first()


def get_roles(session: Session, skip: int = 0, limit: int = 100) -> list[Role]:
    """Get active roles with pagination."""
    return list(session.exec(
        select(Role).where(_active()).order_by(Role.created_at).offset(skip).limit(limit)
    ).all())


def count_roles(session: Session) -> int:
    """Count active roles."""
    return session.exec(select(func.count()).select_from(Role).where(_active())).one()


def is_protected(role: Role) -> bool:
    return role.name in PROTECTED_ROLES


def _ensure_name_is_free(session: Session, name: str, exclude_id: Optional[str] = None):
    existing = get_role_by_name(session, name)
    if existing and existing.id != exclude_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=ROLE_EXISTS,
        )


def _replace_permissions(session: Session, role: Role, permission_ids: list[str]) -> None:
    permissions = get_active_permissions_by_ids(session, permission_ids)
    session.execute(delete(RolePermission).where(RolePermission.role_id == role.id))
    for permission in permissions:
        session.add(RolePermission(role_id=role.id, permission_id=permission.id))


def create_role(session: Session, data: RoleCreate, created_by_id: Optional[str] = None) -> Role:
    """Create a role with its initial permission set."""
    name = data.name.strip()
    _ensure_name_is_free(session, name)

    role = Role(
        name=name,
        description=data.description,
        is_active=data.is_active,
        created_by_id=created_by_id,
    )
    with commit_or_conflict(session, ROLE_EXISTS):
        session.add(role)
        session.flush()
        _replace_permissions(session, role, data.permission_ids)
    session.refresh(role)
    return role


def update_role(session: Session, role: Role, data: RoleUpdate) -> Role:
    """Update role details; permission_ids replaces the permission set."""
    update_data = data.model_dump(exclude_unset=True)
    permission_ids = update_data.pop("permission_ids", None)

    if update_data.get("name"):
        update_data["name"] = update_data["name"].strip()
        _ensure_name_is_free(session, update_data["name"], exclude_id=role.id)

    with commit_or_conflict(session, ROLE_EXISTS):
        for key, value in update_data.items():
            if value is not None:
                setattr(role, key, value)

        if permission_ids is not None:
            _replace_permissions(session, role, permission_ids)

        role.updated_at = utc_now()
        session.add(role)
    session.refresh(role)
    return role


def delete_role(session: Session, role: Role) -> None:
    """Soft delete a role; users holding it are denied from the next request on."""
    role.deleted_at = utc_now()
    session.add(role)
    session.commit()
