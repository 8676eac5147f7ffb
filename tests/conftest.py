"""
Global pytest configuration and fixtures.

Provides:
- In-memory SQLite engine and session
- FastAPI test client with the session dependency overridden
- Helpers for creating users and access tokens per role
"""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_API_KEY", "test-api-key")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-token-secret")
os.environ["ADMIN_EMAIL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

import database.models  # noqa: F401
from database.connection import get_session
from database.models import Role, RoleName, User, UserStatus
from database.seed import seed_database
from auth.password import hash_password
from auth.token import create_access_token
from core.role_cache import WellKnownRoleCache
from main import app as fastapi_app


API_KEY = os.environ["SECRET_API_KEY"]
PASSWORD = "secret-password"


@pytest.fixture
def engine():
    """Fresh in-memory database shared across threads for one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def app(engine):
    """App wired to the test database, seeded from its own routes."""
    def override_get_session():
        with Session(engine) as session:
            yield session

    fastapi_app.dependency_overrides[get_session] = override_get_session
    fastapi_app.state.role_cache = WellKnownRoleCache()
    seed_database(fastapi_app.routes, engine)

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def get_role(session: Session, role_name: RoleName | str) -> Role:
    name = role_name.value if isinstance(role_name, RoleName) else role_name
    return session.exec(select(Role).where(Role.name == name, Role.deleted_at.is_(None))).first()


def make_user(session: Session, role: Role, email: str, status: UserStatus = UserStatus.ACTIVE) -> User:
    user = User(
        email=email,
        name=email.split("@")[0],
        password_hash=hash_password(PASSWORD),
        status=status.value,
        role_id=role.id,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def bearer(user: User, role: Role) -> dict:
    token = create_access_token(user.id, role.id, role.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login_as(app, session):
    """Create a user with the given role and return its auth headers and user."""
    def _login_as(role_name: RoleName | str, email: str | None = None):
        role = get_role(session, role_name)
        name = role_name.value if isinstance(role_name, RoleName) else role_name
        user = make_user(session, role, email or f"{name}-{os.urandom(4).hex()}@example.com")
        return bearer(user, role), user

    return _login_as


@pytest.fixture
def admin_headers(login_as):
    headers, _ = login_as(RoleName.ADMIN)
    return headers
