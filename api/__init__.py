from fastapi import APIRouter, Depends

from api.auth.routes import router as auth_router
from api.role.routes import router as role_router
from api.permission.routes import router as permission_router
from api.user.routes import router as user_router
from api.product.routes import router as product_router
from api.product.manage_routes import router as manage_product_router
from api.brand.routes import router as brand_router
from api.category.routes import router as category_router
from api.runtime.routes import router as runtime_router
from auth.dependencies import access_guard

# Every route passes the access guard; public routes are declared in auth.route_rules
api_router = APIRouter(dependencies=[Depends(access_guard)])

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(role_router, prefix="/roles", tags=["roles"])
api_router.include_router(permission_router, prefix="/permissions", tags=["permissions"])
api_router.include_router(user_router, prefix="/users", tags=["users"])
api_router.include_router(product_router, prefix="/products", tags=["products"])
api_router.include_router(manage_product_router, prefix="/manage-product/products", tags=["manage-product"])
api_router.include_router(brand_router, prefix="/brands", tags=["brands"])
api_router.include_router(category_router, prefix="/categories", tags=["categories"])
api_router.include_router(runtime_router, prefix="/runtime", tags=["runtime"])
