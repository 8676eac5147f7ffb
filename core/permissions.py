"""
Centralized permission helpers.
A permission is a (route template, HTTP method) pair grouped into a module.
"""
from database.models.permission import HTTPMethod
from database.models.role import RoleName


SUPPORTED_METHODS = {method.value for method in HTTPMethod}


def derive_module(path: str) -> str:
    """Module name is the first path segment, upper-cased ("/brands/{id}" -> "BRANDS")."""
    segments = path.split("/")
    return segments[1].upper() if len(segments) > 1 else ""


def permission_name(method: str, path: str) -> str:
    return f"{method.upper()} {path}"


def permission_key(method: str, path: str) -> str:
    """Identity used when diffing registered routes against stored permissions."""
    return f"{method.upper()}-{path}"


def is_default_grant(role_name: str, method: str, path: str) -> bool:
    """Whether the seeder grants this route to a well-known role by default.

    Admin gets everything; sellers manage their own catalogue; every signed-in
    role may read its own profile.
    """
    if role_name == RoleName.ADMIN.value:
        return True

    if method.upper() == HTTPMethod.GET.value and path == "/auth/me":
        return True

    if role_name == RoleName.SELLER.value:
        return derive_module(path) == "MANAGE-PRODUCT"

    return False


def collect_route_permissions(routes) -> list[dict]:
    """Permission rows for every (method, route template) the app serves.

    HEAD/OPTIONS and non-API routes (docs, static mounts) are skipped.
    """
    from fastapi.routing import APIRoute

    collected = []
    for route in routes:
        if not isinstance(route, APIRoute):
            continue
        for method in sorted(route.methods or []):
            if method not in SUPPORTED_METHODS:
                continue
            collected.append({
                "name": permission_name(method, route.path_format),
                "path": route.path_format,
                "method": method,
                "module": derive_module(route.path_format),
                "description": route.summary or (route.description or "").strip().split("\n")[0] or None,
            })
    return collected
