"""Merchant service models package."""

from services.merchant_service.models.enums import (
    STORE_PROFILE_TABLE,
    AuthState,
    CollectionName,
    OrderStatus,
)
from services.merchant_service.models.local import LocalEntry

__all__ = [
    "AuthState",
    "CollectionName",
    "LocalEntry",
    "OrderStatus",
    "STORE_PROFILE_TABLE",
]
