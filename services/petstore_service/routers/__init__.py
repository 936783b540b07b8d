"""Pet store routers package."""

from services.petstore_service.routers.addresses import router as addresses_router
from services.petstore_service.routers.audit import router as audit_router
from services.petstore_service.routers.auth import router as auth_router
from services.petstore_service.routers.categories import router as categories_router
from services.petstore_service.routers.discounts import router as discounts_router
from services.petstore_service.routers.pets import router as pets_router
from services.petstore_service.routers.store import router as store_router
from services.petstore_service.routers.users import router as users_router

__all__ = [
    "addresses_router",
    "audit_router",
    "auth_router",
    "categories_router",
    "discounts_router",
    "pets_router",
    "store_router",
    "users_router",
]
