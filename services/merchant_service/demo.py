"""Demo mode: a working console without a Backendless app.

The signed-in account and the store profile survive restarts in the local
``console_local_entries`` table under the keys "account" and "profile".
Categories, products and orders live in process memory, seeded with a
small sample catalogue the first time a store profile exists.
"""

import secrets
import uuid
from datetime import timedelta
from typing import Any, Optional

from libs.auth.models import Account, AuthSession
from libs.baas.errors import AuthenticationError
from libs.baas.identity import IdentityProvider, split_display_name
from libs.baas.store import OBJECT_ID, MemoryRecordStore, Record
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.merchant_service.models import (
    STORE_PROFILE_TABLE,
    CollectionName,
    LocalEntry,
    OrderStatus,
)
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

ACCOUNT_KEY = "account"
PROFILE_KEY = "profile"


class LocalKeyValueStore:
    """JSON documents stored by key in the local database."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Optional[Any]:
        entry = await self.db.get(LocalEntry, key)
        return entry.value if entry else None

    async def set(self, key: str, value: Any) -> None:
        entry = await self.db.get(LocalEntry, key)
        if entry is None:
            self.db.add(LocalEntry(key=key, value=value))
        else:
            entry.value = value
        await self.db.commit()

    async def delete(self, key: str) -> None:
        entry = await self.db.get(LocalEntry, key)
        if entry is not None:
            await self.db.delete(entry)
            await self.db.commit()


# ============================================================================
# IDENTITY
# ============================================================================


def demo_account_id(email: str) -> str:
    """Stable account id for an email, so a returning user finds their store."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"mailto:{email.strip().lower()}"))


class DemoIdentity(IdentityProvider):
    """
    Accepts any credentials and remembers one signed-in account.

    Signing out forgets the account but keeps the store profile, so signing
    back in with the same email goes straight to the dashboard.
    """

    def __init__(self, kv: LocalKeyValueStore, user_token: Optional[str] = None):
        self.kv = kv
        self.user_token = user_token

    async def _stored(self) -> Optional[dict]:
        return await self.kv.get(ACCOUNT_KEY)

    async def get_current_account(self) -> Optional[Account]:
        stored = await self._stored()
        if not stored or not self.user_token:
            return None
        if not secrets.compare_digest(stored.get("userToken") or "", self.user_token):
            return None
        return Account.from_backend(stored)

    async def login(self, email: str, password: str) -> AuthSession:
        stored = await self._stored() or {}
        account_id = demo_account_id(email)
        if stored.get("objectId") != account_id:
            stored = {"objectId": account_id, "email": email}

        token = secrets.token_urlsafe(32)
        await self.kv.set(ACCOUNT_KEY, {**stored, "userToken": token})
        self.user_token = token
        logger.info(f"Demo account {account_id} signed in")
        return AuthSession(account=Account.from_backend(stored), user_token=token)

    async def register(self, email: str, password: str, name: str) -> Account:
        first_name, last_name = split_display_name(name)
        stored = {
            "objectId": demo_account_id(email),
            "email": email,
            "name": name,
            "firstName": first_name,
            "lastName": last_name,
        }
        await self.kv.set(ACCOUNT_KEY, stored)
        return Account.from_backend(stored)

    async def logout(self) -> None:
        if await self.get_current_account() is None:
            return
        await self.kv.delete(ACCOUNT_KEY)
        self.user_token = None

    async def update_account(self, fields: dict[str, Any]) -> Account:
        if await self.get_current_account() is None:
            raise AuthenticationError("No user logged in")
        stored = await self._stored()
        changes = {key: value for key, value in fields.items() if key != "password"}
        updated = {**stored, **changes}
        await self.kv.set(ACCOUNT_KEY, updated)
        return Account.from_backend(updated)

    async def restore_password(self, email: str) -> None:
        logger.info(f"Demo mode: password reset for {email} is a no-op")


# ============================================================================
# RECORDS
# ============================================================================


def sample_catalogue() -> dict[CollectionName, list[Record]]:
    """The demo store's starting categories, products and orders."""
    now = utc_now()
    return {
        CollectionName.CATEGORIES: [
            {OBJECT_ID: "cat1", "name": "Best Sellers", "productCount": 2},
            {OBJECT_ID: "cat2", "name": "New Arrivals", "productCount": 1},
        ],
        CollectionName.PRODUCTS: [
            {
                OBJECT_ID: "prod1",
                "name": "Premium Cotton T-Shirt",
                "description": "High quality cotton t-shirt perfect for summer.",
                "price": 24.99,
                "isAvailable": True,
                "categoryId": "cat1",
                "imageUrl": "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?auto=format&fit=crop&w=500&q=60",
            },
            {
                OBJECT_ID: "prod2",
                "name": "Denim Jacket",
                "description": "Classic denim jacket with a modern fit.",
                "price": 89.99,
                "isAvailable": True,
                "categoryId": "cat2",
                "imageUrl": "https://images.unsplash.com/photo-1551537482-f2075a1d41f2?auto=format&fit=crop&w=500&q=60",
            },
        ],
        CollectionName.ORDERS: [
            {
                OBJECT_ID: "ORD-772391",
                "customerName": "Sarah Johnson",
                "customerEmail": "sarah.j@example.com",
                "date": (now - timedelta(days=1)).isoformat(),
                "status": OrderStatus.PENDING.value,
                "totalAmount": 114.98,
                "items": [
                    {"productId": "prod1", "productName": "Premium Cotton T-Shirt", "quantity": 1, "price": 24.99},
                    {"productId": "prod2", "productName": "Denim Jacket", "quantity": 1, "price": 89.99},
                ],
            },
            {
                OBJECT_ID: "ORD-772392",
                "customerName": "Mike Chen",
                "customerEmail": "mike.c@example.com",
                "date": (now - timedelta(days=2)).isoformat(),
                "status": OrderStatus.SHIPPED.value,
                "totalAmount": 49.98,
                "items": [
                    {"productId": "prod1", "productName": "Premium Cotton T-Shirt", "quantity": 2, "price": 24.99},
                ],
            },
        ],
    }


class DemoWorkspace:
    """
    In-memory record store whose store profile is mirrored to local storage.

    Pass it as the profile mirror of the console so every profile save is
    written through to the "profile" entry.
    """

    def __init__(self, kv: LocalKeyValueStore, store: Optional[MemoryRecordStore] = None):
        self.kv = kv
        self.store = store if store is not None else MemoryRecordStore()

    async def restore(self) -> MemoryRecordStore:
        """Load the remembered profile into an empty store."""
        if STORE_PROFILE_TABLE in self.store.tables():
            return self.store
        profile = await self.kv.get(PROFILE_KEY)
        if profile and profile.get(OBJECT_ID):
            await self.store.save(STORE_PROFILE_TABLE, profile)
            await self.seed(profile[OBJECT_ID])
            logger.info(f"Restored demo store {profile[OBJECT_ID]}")
        return self.store

    async def seed(self, store_id: str) -> None:
        """Fill the collections with the sample catalogue once."""
        if CollectionName.CATEGORIES.table in self.store.tables():
            return
        for name, records in sample_catalogue().items():
            for record in records:
                await self.store.save(name.table, {**record, "merchantId": store_id})

    async def remember_profile(self, profile: Record) -> None:
        stored = {key: value for key, value in profile.items() if key != "id"}
        await self.kv.set(PROFILE_KEY, stored)
        await self.seed(profile[OBJECT_ID])
