"""
Database seeding for the built-in roles, route permissions and the
initial admin account. Safe to run on every startup.
"""
from sqlmodel import Session, select
from database.connection import engine
from database.models import Role, RoleName, Permission, RolePermission, User, UserStatus
from core.permissions import collect_route_permissions, is_default_grant
from api.permission.crud import sync_permissions
from auth.password import hash_password
from config.auth_settings import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME
from utils.logger import get_logger

logger = get_logger(__name__)


# Define roles (using .value to store as strings in DB)
ROLES = [
    {
        "name": RoleName.ADMIN.value,
        "description": "Administrator - Full system access",
    },
    {
        "name": RoleName.CLIENT.value,
        "description": "Client - Default role for registered shoppers",
    },
    {
        "name": RoleName.SELLER.value,
        "description": "Seller - Manages own products",
    },
]


def _seed_roles(session: Session) -> dict[str, Role]:
    role_map = {}
    for role_data in ROLES:
        existing = session.exec(
            select(Role).where(Role.name == role_data["name"], Role.deleted_at.is_(None))
        ).first()

        if existing:
            role_map[role_data["name"]] = existing
        else:
            role = Role(**role_data)
            session.add(role)
            session.flush()
            role_map[role_data["name"]] = role
            logger.info(f"Role {role.name} created")

    session.commit()
    return role_map


def _seed_default_grants(session: Session, role_map: dict[str, Role]) -> int:
    permissions = session.exec(select(Permission).where(Permission.deleted_at.is_(None))).all()

    granted = 0
    for role_name, role in role_map.items():
        for permission in permissions:
            if not is_default_grant(role_name, permission.method, permission.path):
                continue

            # Check if association exists
            existing = session.exec(
                select(RolePermission).where(
                    RolePermission.role_id == role.id,
                    RolePermission.permission_id == permission.id
                )
            ).first()

            if not existing:
                session.add(RolePermission(role_id=role.id, permission_id=permission.id))
                granted += 1

    session.commit()
    return granted


def _seed_admin_user(session: Session, admin_role: Role) -> None:
    if not ADMIN_EMAIL or not ADMIN_PASSWORD:
        return

    email = ADMIN_EMAIL.strip().lower()
    existing = session.exec(
        select(User).where(User.email == email, User.deleted_at.is_(None))
    ).first()
    if existing:
        return

    session.add(User(
        email=email,
        name=ADMIN_NAME,
        password_hash=hash_password(ADMIN_PASSWORD),
        status=UserStatus.ACTIVE.value,
        role_id=admin_role.id,
    ))
    session.commit()
    logger.info(f"Admin user {email} created")


def seed_database(routes, db_engine=None):
    """Seed roles, sync permissions with the given routes and grant role defaults."""
    with Session(db_engine or engine) as session:
        role_map = _seed_roles(session)
        sync_permissions(session, collect_route_permissions(routes))
        granted = _seed_default_grants(session, role_map)
        _seed_admin_user(session, role_map[RoleName.ADMIN.value])

    logger.info(f"Database seeded successfully ({granted} default grants added)")
