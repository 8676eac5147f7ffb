"""
Role-based access decision for a single request.

The engine answers one question: may the role behind an authenticated request
invoke the route template (path, method)? It reads the committed role/permission
graph on every call and never caches permission sets between requests.
"""
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from database.models import Permission, Role, RolePermission
from utils.logger import get_logger

logger = get_logger(__name__)


class DecisionReason(str, Enum):
    GRANTED = "granted"
    PERMISSION_MISSING = "permission_missing"
    ROLE_NOT_FOUND = "role_not_found"
    LOOKUP_FAILED = "lookup_failed"


@dataclass(frozen=True)
class AuthDecision:
    allowed: bool
    reason: DecisionReason

    @classmethod
    def allow(cls) -> "AuthDecision":
        return cls(allowed=True, reason=DecisionReason.GRANTED)

    @classmethod
    def deny(cls, reason: DecisionReason) -> "AuthDecision":
        return cls(allowed=False, reason=reason)


class RoleNotFoundError(LookupError):
    """Raised when a role id does not resolve to an active (non-deleted) role."""

    def __init__(self, role_id: str):
        super().__init__(f"Role {role_id} not found.")
        self.role_id = role_id


class AuthorizationEngine:
    """Per-request permission check backed by the SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def _get_active_role(self, role_id: str) -> Role | None:
        return self.session.exec(
            select(Role).where(Role.id == role_id, Role.deleted_at.is_(None))
        ).first()

    def authorize(self, role_id: str, path: str, method: str) -> AuthDecision:
        """Decide whether role_id may call (path, method).

        Args:
            role_id: Role claim of the authenticated identity.
            path: Route template resolved by the router (e.g. "/roles/{role_id}"),
                not the literal request URL.
            method: HTTP method, compared upper-cased.

        Returns:
            AuthDecision. Unknown or soft-deleted roles and any persistence error
            produce a deny; this method never raises for lookup problems.
        """
        method = method.upper()

        try:
            role = self._get_active_role(role_id)
            if role is None:
                logger.warning(f"Authorization denied: role {role_id} not found")
                return AuthDecision.deny(DecisionReason.ROLE_NOT_FOUND)

            # Filter server-side to the single (path, method) pair
            match = self.session.exec(
                select(Permission.id)
                .join(RolePermission, RolePermission.permission_id == Permission.id)
                .where(
                    RolePermission.role_id == role.id,
                    Permission.path == path,
                    Permission.method == method,
                    Permission.deleted_at.is_(None),
                )
                .limit(1)
            ).first()
        except SQLAlchemyError:
            logger.error(
                f"Authorization lookup failed for role {role_id} on {method} {path}",
                exc_info=True,
            )
            return AuthDecision.deny(DecisionReason.LOOKUP_FAILED)

        if match is None:
            logger.warning(f"Authorization denied: role {role.name} lacks {method} {path}")
            return AuthDecision.deny(DecisionReason.PERMISSION_MISSING)

        return AuthDecision.allow()

    def resolve_permissions_snapshot(self, role_id: str) -> list[Permission]:
        """Full active permission set of an active role, for management screens."""
        role = self._get_active_role(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)

        return list(self.session.exec(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(
                RolePermission.role_id == role.id,
                Permission.deleted_at.is_(None),
            )
            .order_by(Permission.module, Permission.path, Permission.method)
        ).all())
