import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from auth.config import ApiKeyConfig
from auth.strategies import (
    ApiKeyStrategy,
    BearerTokenStrategy,
    NoAuthStrategy,
    RequestCredentials,
    authenticate,
)
from auth.token import AccessTokenClaims, create_access_token
from auth.route_rules import ROUTE_AUTH_TABLE
from core.route_auth import (
    AuthorizationType,
    CombinedCondition,
    DEFAULT_RULE,
    PUBLIC_RULE,
    RouteAuthRule,
    RouteAuthTable,
)


API_KEY_CONFIG = ApiKeyConfig(secret_api_key="machine-key", header_name="x-api-key")

STRATEGIES = {
    AuthorizationType.BEARER: BearerTokenStrategy(),
    AuthorizationType.API_KEY: ApiKeyStrategy(API_KEY_CONFIG),
    AuthorizationType.NONE: NoAuthStrategy(),
}

BOTH_OR = RouteAuthRule((AuthorizationType.API_KEY, AuthorizationType.BEARER), CombinedCondition.OR)
BOTH_AND = RouteAuthRule((AuthorizationType.API_KEY, AuthorizationType.BEARER), CombinedCondition.AND)


def bearer_credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def token():
    return create_access_token("user-1", "role-1", "seller")


class TestRouteAuthTable:
    def test_unregistered_route_uses_default_rule(self):
        table = RouteAuthTable()

        assert table.rule_for("GET", "/users") == DEFAULT_RULE
        assert DEFAULT_RULE.authorization_types == (AuthorizationType.BEARER,)
        assert DEFAULT_RULE.combined_condition == CombinedCondition.AND
        assert not DEFAULT_RULE.is_public

    def test_lookup_is_method_case_insensitive(self):
        table = RouteAuthTable()
        table.public("post", "/auth/login")

        assert table.rule_for("POST", "/auth/login") == PUBLIC_RULE
        assert table.rule_for("POST", "/auth/login").is_public

    def test_app_rules(self):
        assert ROUTE_AUTH_TABLE.rule_for("GET", "/products/{product_id}").is_public
        assert not ROUTE_AUTH_TABLE.rule_for("GET", "/manage-product/products").is_public
        assert ROUTE_AUTH_TABLE.rule_for("GET", "/categories/{category_id}").is_public
        assert not ROUTE_AUTH_TABLE.rule_for("POST", "/brands").is_public
        assert ROUTE_AUTH_TABLE.rule_for("POST", "/permissions/sync").combined_condition == CombinedCondition.OR


class TestAuthenticate:
    def test_public_rule_needs_nothing(self):
        assert authenticate(RequestCredentials(), PUBLIC_RULE, STRATEGIES) is None

    def test_default_rule_returns_claims(self, token):
        claims = authenticate(RequestCredentials(bearer=bearer_credentials(token)), DEFAULT_RULE, STRATEGIES)

        assert isinstance(claims, AccessTokenClaims)
        assert claims.user_id == "user-1"
        assert claims.role_name == "seller"

    def test_default_rule_without_token(self):
        with pytest.raises(HTTPException) as exc_info:
            authenticate(RequestCredentials(), DEFAULT_RULE, STRATEGIES)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Access token is required."

    def test_invalid_token(self):
        credentials = RequestCredentials(bearer=bearer_credentials("nope"))

        with pytest.raises(HTTPException) as exc_info:
            authenticate(credentials, DEFAULT_RULE, STRATEGIES)

        assert exc_info.value.detail == "Access token is invalid."

    def test_or_first_success_wins(self, token):
        assert authenticate(RequestCredentials(api_key="machine-key"), BOTH_OR, STRATEGIES) is None

        claims = authenticate(RequestCredentials(bearer=bearer_credentials(token)), BOTH_OR, STRATEGIES)
        assert claims.user_id == "user-1"

    def test_or_all_failing(self):
        with pytest.raises(HTTPException) as exc_info:
            authenticate(RequestCredentials(api_key="wrong"), BOTH_OR, STRATEGIES)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Unauthorized header."

    def test_and_requires_every_strategy(self, token):
        with pytest.raises(HTTPException) as exc_info:
            authenticate(RequestCredentials(bearer=bearer_credentials(token)), BOTH_AND, STRATEGIES)

        assert exc_info.value.detail == "API key is invalid."

        credentials = RequestCredentials(bearer=bearer_credentials(token), api_key="machine-key")
        assert authenticate(credentials, BOTH_AND, STRATEGIES).user_id == "user-1"

    def test_empty_api_key_config_disables_api_key(self):
        strategy = ApiKeyStrategy(ApiKeyConfig(secret_api_key="", header_name="x-api-key"))

        with pytest.raises(HTTPException):
            strategy.verify(RequestCredentials(api_key=""))
