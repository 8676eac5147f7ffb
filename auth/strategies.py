import secrets
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from auth.config import ApiKeyConfig, get_api_key_config
from auth.token import AccessTokenClaims, verify_access_token
from core.route_auth import AuthorizationType, CombinedCondition, RouteAuthRule
from utils.logger import get_logger

logger = get_logger(__name__)


# Parsing only; whether a credential is required is decided per route
bearer_scheme = HTTPBearer(auto_error=False)
api_key_scheme = APIKeyHeader(name=get_api_key_config().header_name, auto_error=False)


@dataclass
class RequestCredentials:
    """Credentials the security schemes extracted from the request headers."""
    bearer: Optional[HTTPAuthorizationCredentials] = None
    api_key: Optional[str] = None


def get_request_credentials(
    bearer: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    api_key: str | None = Depends(api_key_scheme),
) -> RequestCredentials:
    return RequestCredentials(bearer=bearer, api_key=api_key)


class BearerTokenStrategy:
    """Identity from an "Authorization: Bearer <token>" header."""

    def verify(self, credentials: RequestCredentials) -> AccessTokenClaims:
        if credentials.bearer and credentials.bearer.credentials:
            return verify_access_token(credentials.bearer.credentials)

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token is required.",
            headers={"WWW-Authenticate": "Bearer"},
        )


class ApiKeyStrategy:
    """Machine identity from a shared secret header. Carries no role."""

    def __init__(self, config: ApiKeyConfig | None = None):
        self.config = config or get_api_key_config()

    def verify(self, credentials: RequestCredentials) -> None:
        if (
            self.config.enabled
            and credentials.api_key
            and secrets.compare_digest(credentials.api_key, self.config.secret_api_key)
        ):
            return None

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key is invalid.",
        )


class NoAuthStrategy:
    def verify(self, credentials: RequestCredentials) -> None:
        return None


def default_strategies() -> dict:
    return {
        AuthorizationType.BEARER: BearerTokenStrategy(),
        AuthorizationType.API_KEY: ApiKeyStrategy(),
        AuthorizationType.NONE: NoAuthStrategy(),
    }


def authenticate(
    credentials: RequestCredentials,
    rule: RouteAuthRule,
    strategies: dict,
) -> AccessTokenClaims | None:
    """Run the rule's identity strategies under its combination policy.

    Returns the bearer claims when a bearer token was verified, otherwise None
    (public route or API-key identity). Raises 401 when the rule is not met.
    """
    if rule.combined_condition == CombinedCondition.OR:
        for authorization_type in rule.authorization_types:
            try:
                return strategies[authorization_type].verify(credentials)
            except HTTPException as exc:
                logger.debug(f"{authorization_type.value} identity rejected: {exc.detail}")
                continue

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized header.",
        )

    claims = None
    for authorization_type in rule.authorization_types:
        # AND: the first failing strategy propagates its own 401
        result = strategies[authorization_type].verify(credentials)
        if result is not None:
            claims = result

    return claims
