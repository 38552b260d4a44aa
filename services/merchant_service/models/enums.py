"""Enum definitions for the merchant console."""

import enum


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class AuthState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    ONBOARDING = "onboarding"
    AUTHENTICATED = "authenticated"


class CollectionName(str, enum.Enum):
    """Store-owned collections and the Backendless tables holding them."""

    CATEGORIES = "categories"
    PRODUCTS = "products"
    ORDERS = "orders"

    @property
    def table(self) -> str:
        return _COLLECTION_TABLES[self]


STORE_PROFILE_TABLE = "StoreInfo"

_COLLECTION_TABLES = {
    CollectionName.CATEGORIES: "Categories",
    CollectionName.PRODUCTS: "Products",
    CollectionName.ORDERS: "Orders",
}
