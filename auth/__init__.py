from auth.dependencies import (
    access_guard,
    get_current_claims,
    get_current_user,
    get_role_cache,
)
from auth.service import get_user_by_email, register_user, login
from auth.token import AccessTokenClaims, create_access_token, verify_access_token

__all__ = [
    "access_guard",
    "get_current_claims",
    "get_current_user",
    "get_role_cache",
    "get_user_by_email",
    "register_user",
    "login",
    "AccessTokenClaims",
    "create_access_token",
    "verify_access_token",
]
