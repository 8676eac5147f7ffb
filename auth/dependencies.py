from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session, select

from database.models import User, UserStatus
from database.connection import get_session
from auth.route_rules import ROUTE_AUTH_TABLE
from auth.strategies import (
    RequestCredentials,
    authenticate,
    default_strategies,
    get_request_credentials,
)
from auth.token import AccessTokenClaims
from core.authorization import AuthorizationEngine
from core.role_cache import WellKnownRoleCache
from core.route_auth import RouteAuthTable
from utils.logger import get_logger

logger = get_logger(__name__)


def resolve_route_template(request: Request) -> str:
    """Route template the router matched ("/roles/{role_id}"), not the raw URL."""
    route = request.scope.get("route")
    if not getattr(route, "path_format", ""):
        # Guards only run inside matched routes; refuse rather than guess
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")
    return route.path_format


class AccessGuard:
    """Router-level dependency gating every request.

    1. Looks the matched route up in the route auth table.
    2. Establishes identity with the rule's strategies (401 on failure).
    3. When a bearer identity was established, checks the role's permission
       for (route template, method) (403 on denial, fail-closed).
    """

    def __init__(self, route_auth: RouteAuthTable, strategies: dict | None = None):
        self.route_auth = route_auth
        self.strategies = strategies or default_strategies()

    def __call__(
        self,
        request: Request,
        credentials: RequestCredentials = Depends(get_request_credentials),
        session: Session = Depends(get_session),
    ) -> AccessTokenClaims | None:
        path = resolve_route_template(request)
        method = request.method
        rule = self.route_auth.rule_for(method, path)

        if rule.is_public:
            request.state.identity = None
            return None

        claims = authenticate(credentials, rule, self.strategies)
        request.state.identity = claims

        if claims is None:
            return None

        decision = AuthorizationEngine(session).authorize(claims.role_id, path, method)
        if not decision.allowed:
            logger.warning(
                f"Access denied for user {claims.user_id} on {method} {path} ({decision.reason.value})"
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")

        return claims


access_guard = AccessGuard(ROUTE_AUTH_TABLE)


def get_current_claims(claims: AccessTokenClaims | None = Depends(access_guard)) -> AccessTokenClaims:
    """Bearer identity of the request; 401 on routes reached without one."""
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token is required.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def get_current_user(
    claims: AccessTokenClaims = Depends(get_current_claims),
    session: Session = Depends(get_session),
) -> User:
    """Get current authenticated user from the token claims."""
    user = session.exec(
        select(User).where(User.id == claims.user_id, User.deleted_at.is_(None))
    ).first()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if user.status != UserStatus.ACTIVE.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is not active",
        )

    return user


def get_role_cache(request: Request) -> WellKnownRoleCache:
    return request.app.state.role_cache
