from fastapi import HTTPException, status
from sqlmodel import Session, select

from database.connection import commit_or_conflict
from database.models import User, UserStatus, Role
from auth.password import hash_password, verify_password
from auth.token import create_access_token
from core.role_cache import WellKnownRoleCache
from utils.dates import utc_now

EMAIL_EXISTS = "Email already exists."


def get_user_by_email(session: Session, email: str) -> User | None:
    """Find an active (non-deleted) user by email, case-insensitively."""
    return session.exec(
        select(User).where(User.email == email.strip().lower(), User.deleted_at.is_(None))
    ).first()


def register_user(
    session: Session,
    role_cache: WellKnownRoleCache,
    email: str,
    name: str,
    password: str,
    phone_number: str | None = None,
) -> User:
    """Self-registration; new accounts always get the client role."""
    if get_user_by_email(session, email):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=EMAIL_EXISTS,
        )

    now = utc_now()
    user = User(
        email=email.strip().lower(),
        name=name,
        password_hash=hash_password(password),
        phone_number=phone_number,
        status=UserStatus.ACTIVE.value,
        role_id=role_cache.get_client_role_id(session),
        created_at=now,
        updated_at=now,
    )
    with commit_or_conflict(session, EMAIL_EXISTS):
        session.add(user)
    session.refresh(user)
    return user


def login(session: Session, email: str, password: str) -> tuple[User, Role, str]:
    """Check credentials and issue an access token.

    Returns:
        Tuple of (user, role, access_token)
    """
    user = get_user_by_email(session, email)
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email or password is incorrect.",
        )

    if user.status != UserStatus.ACTIVE.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is not active",
        )

    role = session.exec(
        select(Role).where(Role.id == user.role_id, Role.deleted_at.is_(None))
    ).first()
    if not role:
        # Role was removed after the account was created
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User role is no longer available.",
        )

    token = create_access_token(user_id=user.id, role_id=role.id, role_name=role.name)
    return user, role, token
