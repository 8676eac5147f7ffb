from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from database.models import User, Role
from api.auth.schemas import (
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    MeResponse,
    MeRole,
    MePermission,
)
from auth.dependencies import get_current_user, get_role_cache
from auth.service import register_user, login as login_user
from core.authorization import AuthorizationEngine, RoleNotFoundError
from core.role_cache import WellKnownRoleCache
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: RegisterRequest,
    session: Session = Depends(get_session),
    role_cache: WellKnownRoleCache = Depends(get_role_cache),
):
    """Create a client account and sign it in."""
    register_user(
        session,
        role_cache,
        email=data.email,
        name=data.name,
        password=data.password,
        phone_number=data.phone_number,
    )
    _, _, token = login_user(session, data.email, data.password)
    logger.info(f"Registered new client account {data.email}")
    return TokenResponse(access_token=token)


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, session: Session = Depends(get_session)):
    """Exchange email and password for an access token."""
    _, _, token = login_user(session, data.email, data.password)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=MeResponse)
def get_me(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Current user with role and full permission set."""
    role = session.get(Role, current_user.role_id)
    try:
        permissions = AuthorizationEngine(session).resolve_permissions_snapshot(current_user.role_id)
    except RoleNotFoundError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")

    return MeResponse(
        id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        phone_number=current_user.phone_number,
        status=current_user.status,
        created_at=current_user.created_at,
        role=MeRole.model_validate(role),
        permissions=[MePermission.model_validate(p) for p in permissions],
    )
