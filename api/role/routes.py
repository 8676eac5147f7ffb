from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from database.models import Role
from api.role import crud
from api.role.schemas import (
    RoleCreate,
    RoleUpdate,
    RoleResponse,
    RoleDetailResponse,
    RoleListResponse,
)
from api.permission.schemas import PermissionResponse
from auth.dependencies import get_current_claims
from auth.token import AccessTokenClaims
from core.authorization import AuthorizationEngine
from config.settings import MAX_PAGE_SIZE
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _role_detail(session: Session, role: Role) -> RoleDetailResponse:
    permissions = AuthorizationEngine(session).resolve_permissions_snapshot(role.id)
    return RoleDetailResponse(
        **RoleResponse.model_validate(role).model_dump(),
        permissions=[PermissionResponse.model_validate(p) for p in permissions],
    )


def _get_modifiable_role(session: Session, role_id: str) -> Role:
    role = crud.get_role(session, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")

    if crud.is_protected(role):
        raise HTTPException(status_code=403, detail="You cannot modify this role.")

    return role


@router.get("", response_model=RoleListResponse)
def list_roles(
    skip: int = 0,
    limit: int = 100,
    session: Session = Depends(get_session),
):
    """List active roles."""
    limit = min(limit, MAX_PAGE_SIZE)
    roles = crud.get_roles(session, skip, limit)
    total = crud.count_roles(session)
    return RoleListResponse(roles=roles, total=total)


@router.post("", response_model=RoleDetailResponse, status_code=status.HTTP_201_CREATED)
def create_role(
    data: RoleCreate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    """Create a role with a set of permissions."""
    role = crud.create_role(session, data, created_by_id=claims.user_id)
    logger.info(f"Role {role.name} created by user {claims.user_id}")
    return _role_detail(session, role)


@router.get("/{role_id}", response_model=RoleDetailResponse)
def get_role(role_id: str, session: Session = Depends(get_session)):
    """Get role details including its active permissions."""
    role = crud.get_role(session, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return _role_detail(session, role)


@router.put("/{role_id}", response_model=RoleDetailResponse)
def update_role(
    role_id: str,
    data: RoleUpdate,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    """Update a role. Built-in roles cannot be modified."""
    role = _get_modifiable_role(session, role_id)
    role = crud.update_role(session, role, data)
    logger.info(f"Role {role.name} updated by user {claims.user_id}")
    return _role_detail(session, role)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(
    role_id: str,
    session: Session = Depends(get_session),
    claims: AccessTokenClaims = Depends(get_current_claims),
):
    """Soft delete a role. Built-in roles cannot be deleted."""
    role = _get_modifiable_role(session, role_id)
    crud.delete_role(session, role)
    logger.info(f"Role {role.name} deleted by user {claims.user_id}")
