from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from api.user import crud
from api.user.schemas import (
    UserCreate,
    UserUpdate,
    UserWithDetails,
    UserListResponse,
)
from auth.dependencies import get_current_claims, get_role_cache
from auth.token import AccessTokenClaims
from core.role_cache import WellKnownRoleCache
from config.settings import MAX_PAGE_SIZE

router = APIRouter()


@router.get("", response_model=UserListResponse)
def list_users(
    role_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    session: Session = Depends(get_session),
):
    """List users, optionally filtered by role."""
    limit = min(limit, MAX_PAGE_SIZE)
    users = crud.get_users(session, skip, limit, role_id)
    total = crud.count_users(session, role_id)

    users_with_details = [crud.get_user_with_details(session, u) for u in users]
    return UserListResponse(users=users_with_details, total=total)


@router.post("", response_model=UserWithDetails, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
    role_cache: WellKnownRoleCache = Depends(get_role_cache),
):
    """Create a user. Only admins may create admin users."""
    role_id = data.role_id or role_cache.get_client_role_id(session)

    allowed, reason = crud.can_manage_user(session, role_cache, claims.role_id, new_role_id=role_id)
    if not allowed:
        raise HTTPException(status_code=403, detail=reason)

    user = crud.create_user(session, data, role_id, created_by_id=claims.user_id)
    return crud.get_user_with_details(session, user)


@router.get("/{user_id}", response_model=UserWithDetails)
def get_user(user_id: str, session: Session = Depends(get_session)):
    """Get user details."""
    user = crud.get_user(session, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return crud.get_user_with_details(session, user)


@router.put("/{user_id}", response_model=UserWithDetails)
def update_user(
    user_id: str,
    data: UserUpdate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
    role_cache: WellKnownRoleCache = Depends(get_role_cache),
):
    """Update a user. Users cannot update themselves through this endpoint."""
    if user_id == claims.user_id:
        raise HTTPException(status_code=403, detail="You cannot update your own user.")

    target_user = crud.get_user(session, user_id)
    if not target_user:
        raise HTTPException(status_code=404, detail="User not found")

    allowed, reason = crud.can_manage_user(
        session,
        role_cache,
        claims.role_id,
        target_role_id=target_user.role_id,
        new_role_id=data.role_id,
    )
    if not allowed:
        raise HTTPException(status_code=403, detail=reason)

    updated_user = crud.update_user(session, target_user, data)
    return crud.get_user_with_details(session, updated_user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
    role_cache: WellKnownRoleCache = Depends(get_role_cache),
):
    """Soft delete a user."""
    if user_id == claims.user_id:
        raise HTTPException(status_code=403, detail="You cannot delete your own user.")

    target_user = crud.get_user(session, user_id)
    if not target_user:
        raise HTTPException(status_code=404, detail="User not found")

    allowed, reason = crud.can_manage_user(
        session, role_cache, claims.role_id, target_role_id=target_user.role_id
    )
    if not allowed:
        raise HTTPException(status_code=403, detail=reason)

    if target_user.role_id == claims.role_id:
        raise HTTPException(
            status_code=403,
            detail="You cannot delete a user with the same role as you.",
        )

    crud.delete_user(session, target_user)
