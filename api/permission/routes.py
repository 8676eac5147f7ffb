from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlmodel import Session

from database.connection import get_session
from api.permission import crud
from api.permission.schemas import (
    PermissionCreate,
    PermissionUpdate,
    PermissionResponse,
    PermissionListResponse,
    PermissionSyncResponse,
)
from core.permissions import collect_route_permissions
from config.settings import MAX_PAGE_SIZE

router = APIRouter()


@router.get("", response_model=PermissionListResponse)
def list_permissions(
    skip: int = 0,
    limit: int = 100,
    module: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """List active permissions, optionally filtered by module."""
    limit = min(limit, MAX_PAGE_SIZE)
    permissions = crud.get_permissions(session, skip, limit, module)
    total = crud.count_permissions(session, module)
    return PermissionListResponse(permissions=permissions, total=total)


@router.post("", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
def create_permission(data: PermissionCreate, session: Session = Depends(get_session)):
    """Create a permission for a route template."""
    return crud.create_permission(session, data)


@router.post("/sync", response_model=PermissionSyncResponse)
def sync_permissions(request: Request, session: Session = Depends(get_session)):
    """Synchronize permissions with the routes this app serves."""
    added, deleted = crud.sync_permissions(session, collect_route_permissions(request.app.routes))
    return PermissionSyncResponse(added=added, deleted=deleted, total=crud.count_permissions(session))


@router.get("/{permission_id}", response_model=PermissionResponse)
def get_permission(permission_id: str, session: Session = Depends(get_session)):
    """Get permission details."""
    permission = crud.get_permission(session, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")
    return permission


@router.put("/{permission_id}", response_model=PermissionResponse)
def update_permission(
    permission_id: str,
    data: PermissionUpdate,
    session: Session = Depends(get_session),
):
    """Update a permission."""
    permission = crud.get_permission(session, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")
    return crud.update_permission(session, permission, data)


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_permission(permission_id: str, session: Session = Depends(get_session)):
    """Soft delete a permission."""
    permission = crud.get_permission(session, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")
    crud.delete_permission(session, permission)
