"""Store resolution and scope contexts.

Ownership chain: Category / Product / Order -> StoreProfile -> Account.
Child records point at their store through ``merchantId``; the store profile
points at its account through the same field name.
"""

from dataclasses import dataclass
from typing import Optional, Union

from libs.baas.errors import TableNotFoundError
from libs.baas.filters import Field, Predicate
from libs.baas.store import OBJECT_ID, Record, RecordStore
from libs.common.logging import get_logger
from services.merchant_service.models import STORE_PROFILE_TABLE

logger = get_logger(__name__)

MERCHANT_FIELD = "merchantId"


@dataclass(frozen=True)
class ByStore:
    """Records owned by a resolved store profile."""

    store_id: str


@dataclass(frozen=True)
class ByAccount:
    """Records stamped with the account id, used until a store exists."""

    account_id: str


@dataclass(frozen=True)
class Unscoped:
    """No ownership filter. Never valid for store-owned collections."""


ScopeContext = Union[ByStore, ByAccount, Unscoped]


def scope_predicate(scope: ScopeContext) -> Predicate:
    """Ownership filter for a scope."""
    if isinstance(scope, ByStore):
        return Field(MERCHANT_FIELD) == scope.store_id
    if isinstance(scope, ByAccount):
        return Field(MERCHANT_FIELD) == scope.account_id
    if isinstance(scope, Unscoped):
        raise ValueError("Store-owned collections cannot be read without a scope")
    raise TypeError(f"Unknown scope context: {scope!r}")


class StoreResolver:
    """Finds the store profile owned by an account."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def find_profile(self, account_id: str) -> Optional[Record]:
        """
        The account's store profile record, or None.

        A missing StoreInfo table is the normal state of a fresh backend and
        yields None; any other backend fault propagates.
        """
        try:
            rows = await self.store.find(
                STORE_PROFILE_TABLE, Field(MERCHANT_FIELD) == account_id
            )
        except TableNotFoundError:
            logger.info(f"Table '{STORE_PROFILE_TABLE}' not found; no store for {account_id}")
            return None

        if not rows:
            return None
        if len(rows) > 1:
            logger.warning(
                f"Account {account_id} owns {len(rows)} store profiles; using {rows[0].get(OBJECT_ID)}"
            )
        return rows[0]

    async def resolve_store(self, account_id: str) -> Optional[str]:
        """Store identifier owned by ``account_id``, or None."""
        profile = await self.find_profile(account_id)
        return profile.get(OBJECT_ID) if profile else None

    async def scope_for(self, account_id: str) -> ScopeContext:
        store_id = await self.resolve_store(account_id)
        if store_id:
            return ByStore(store_id)
        return ByAccount(account_id)
