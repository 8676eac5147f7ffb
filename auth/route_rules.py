"""
Identity requirements for every route that does not use the default
(bearer token + permission check).
"""
from core.route_auth import AuthorizationType, RouteAuthTable


def build_route_auth_table() -> RouteAuthTable:
    table = RouteAuthTable()

    # Public
    table.public("POST", "/auth/register")
    table.public("POST", "/auth/login")
    table.public("GET", "/products")
    table.public("GET", "/products/{product_id}")
    table.public("GET", "/brands")
    table.public("GET", "/brands/{brand_id}")
    table.public("GET", "/categories")
    table.public("GET", "/categories/{category_id}")
    table.public("GET", "/runtime")

    # Deploy scripts call this with the API key; admins may call it with a token
    table.any_of("POST", "/permissions/sync", AuthorizationType.API_KEY, AuthorizationType.BEARER)

    return table


ROUTE_AUTH_TABLE = build_route_auth_table()
