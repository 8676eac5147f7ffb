from database.models.user import User, UserStatus
from database.models.role import Role, RoleName, PROTECTED_ROLES
from database.models.permission import Permission, RolePermission, HTTPMethod
from database.models.product import Product, SKU
from database.models.brand import Brand
from database.models.category import Category

__all__ = [
    "User",
    "UserStatus",
    "Role",
    "RoleName",
    "PROTECTED_ROLES",
    "Permission",
    "RolePermission",
    "HTTPMethod",
    "Product",
    "SKU",
    "Brand",
    "Category",
]
