"""
Per-route identity requirements.

Every route is looked up by (method, route template). Routes not registered
fall back to the default rule: a bearer token is required.
"""
from dataclasses import dataclass
from enum import Enum


class AuthorizationType(str, Enum):
    BEARER = "bearer"
    API_KEY = "api_key"
    NONE = "none"


class CombinedCondition(str, Enum):
    AND = "and"  # every strategy must pass
    OR = "or"    # first strategy that passes wins


@dataclass(frozen=True)
class RouteAuthRule:
    authorization_types: tuple[AuthorizationType, ...] = (AuthorizationType.BEARER,)
    combined_condition: CombinedCondition = CombinedCondition.AND

    @property
    def is_public(self) -> bool:
        return all(t == AuthorizationType.NONE for t in self.authorization_types)


DEFAULT_RULE = RouteAuthRule()
PUBLIC_RULE = RouteAuthRule(authorization_types=(AuthorizationType.NONE,))


class RouteAuthTable:
    """Lookup table from (method, route template) to RouteAuthRule."""

    def __init__(self, default: RouteAuthRule = DEFAULT_RULE):
        self.default = default
        self._rules: dict[tuple[str, str], RouteAuthRule] = {}

    def register(self, method: str, path: str, rule: RouteAuthRule) -> None:
        self._rules[(method.upper(), path)] = rule

    def public(self, method: str, path: str) -> None:
        self.register(method, path, PUBLIC_RULE)

    def any_of(self, method: str, path: str, *types: AuthorizationType) -> None:
        self.register(method, path, RouteAuthRule(tuple(types), CombinedCondition.OR))

    def rule_for(self, method: str, path: str) -> RouteAuthRule:
        return self._rules.get((method.upper(), path), self.default)

