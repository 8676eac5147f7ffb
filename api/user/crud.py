from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlmodel import Session, select

from database.connection import commit_or_conflict
from database.models import User, Role
from api.user.schemas import UserCreate, UserUpdate
from auth.password import hash_password
from auth.service import EMAIL_EXISTS, get_user_by_email
from core.role_cache import WellKnownRoleCache
from utils.dates import utc_now


def get_user(session: Session, user_id: str) -> Optional[User]:
    """Get an active (non-deleted) user by ID."""
    return session.exec(
        select(User).where(User.id == user_id, User.deleted_at.is_(None))
    ).first()


def get_users(
    session: Session,
    skip: int = 0,
    limit: int = 100,
    role_id: Optional[str] = None,
) -> list[User]:
    """Get active users, optionally for one role."""
    query = select(User).where(User.deleted_at.is_(None))
    if role_id:
        query = query.where(User.role_id == role_id)
    return list(session.exec(query.order_by(User.created_at).offset(skip).limit(limit)).all())


def count_users(session: Session, role_id: Optional[str] = None) -> int:
    """Count active users."""
    query = select(func.count()).select_from(User).where(User.deleted_at.is_(None))
    if role_id:
        query = query.where(User.role_id == role_id)
    return session.exec(query).one()


def _ensure_role_exists(session: Session, role_id: str) -> None:
    role = session.exec(
        select(Role).where(Role.id == role_id, Role.deleted_at.is_(None))
    ).first()
    if not role:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Role not found.",
        )


def create_user(
    session: Session,
    data: UserCreate,
    role_id: str,
    created_by_id: Optional[str] = None,
) -> User:
    """Create a user with an already validated role."""
    if get_user_by_email(session, data.email):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=EMAIL_EXISTS,
        )
    _ensure_role_exists(session, role_id)

    now = utc_now()
    user = User(
        email=data.email.strip().lower(),
        name=data.name,
        password_hash=hash_password(data.password),
        phone_number=data.phone_number,
        avatar=data.avatar,
        status=data.status.value,
        role_id=role_id,
        created_by_id=created_by_id,
        created_at=now,
        updated_at=now,
    )
    with commit_or_conflict(session, EMAIL_EXISTS):
        session.add(user)
    session.refresh(user)
    return user


def update_user(session: Session, user: User, data: UserUpdate) -> User:
    """Update user details."""
    update_data = data.model_dump(exclude_unset=True)

    password = update_data.pop("password", None)
    if password:
        user.password_hash = hash_password(password)

    if update_data.get("role_id"):
        _ensure_role_exists(session, update_data["role_id"])

    for key, value in update_data.items():
        if value is None:
            continue
        setattr(user, key, value.value if hasattr(value, "value") else value)

    user.updated_at = utc_now()
    with commit_or_conflict(session, EMAIL_EXISTS):
        session.add(user)
    session.refresh(user)
    return user


def delete_user(session: Session, user: User) -> None:
    """Soft delete a user."""
    user.deleted_at = utc_now()
    session.add(user)
    session.commit()


def get_user_with_details(session: Session, user: User) -> dict:
    """Get user with role details."""
    role = session.get(Role, user.role_id) if user.role_id else None

    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "phone_number": user.phone_number,
        "avatar": user.avatar,
        "status": user.status,
        "role_id": user.role_id,
        "role_name": role.name if role else None,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def can_manage_user(
    session: Session,
    role_cache: WellKnownRoleCache,
    active_role_id: str,
    target_role_id: Optional[str] = None,
    new_role_id: Optional[str] = None,
) -> tuple[bool, str]:
    """Check the admin-protection rules for creating, updating or deleting a user.

    Returns:
        Tuple of (allowed, reason)
    """
    admin_role_id = role_cache.get_admin_role_id(session)

    # Admins can manage anyone
    if active_role_id == admin_role_id:
        return True, ""

    if target_role_id == admin_role_id:
        return False, "You are not allowed to manage an admin user."

    if new_role_id == admin_role_id:
        return False, "You are not allowed to grant the admin role."

    return True, ""
