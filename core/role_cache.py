from fastapi import HTTPException, status
from sqlmodel import Session, select

from database.models import Role, RoleName


class WellKnownRoleCache:
    """Process-lifetime memo of the ids of the built-in roles.

    Built-in role names never change, so an id resolved once stays valid until
    the process exits. Only these ids are cached; permission sets are always
    read fresh. One instance lives on app.state and is handed out through the
    get_role_cache dependency.
    """

    def __init__(self):
        self._role_ids: dict[str, str] = {}

    def get_role_id(self, session: Session, role_name: RoleName | str) -> str:
        name = role_name.value if isinstance(role_name, RoleName) else role_name

        cached = self._role_ids.get(name)
        if cached:
            return cached

        role = session.exec(
            select(Role).where(Role.name == name, Role.deleted_at.is_(None))
        ).first()

        if not role:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Role {name} not found.",
            )

        self._role_ids[name] = role.id
        return role.id

    def get_admin_role_id(self, session: Session) -> str:
        return self.get_role_id(session, RoleName.ADMIN)

    def get_client_role_id(self, session: Session) -> str:
        return self.get_role_id(session, RoleName.CLIENT)

    def get_seller_role_id(self, session: Session) -> str:
        return self.get_role_id(session, RoleName.SELLER)
