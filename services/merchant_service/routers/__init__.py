"""Merchant service routers package."""

from services.merchant_service.routers.auth import router as auth_router
from services.merchant_service.routers.catalog import router as catalog_router
from services.merchant_service.routers.orders import router as orders_router
from services.merchant_service.routers.profile import router as profile_router
from services.merchant_service.routers.session import router as session_router

__all__ = [
    "auth_router",
    "catalog_router",
    "orders_router",
    "profile_router",
    "session_router",
]
