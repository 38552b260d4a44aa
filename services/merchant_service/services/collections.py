"""Store-scoped access to the categories, products and orders collections."""

from typing import Any, Iterator, Mapping, Optional, Union

from libs.baas.errors import StoreAccessError, StoreNotFoundError, TableNotFoundError
from libs.baas.filters import Field
from libs.baas.store import OBJECT_ID, Record, RecordStore, normalize_record
from libs.common.config import get_settings
from libs.common.logging import get_logger
from pydantic import BaseModel
from services.merchant_service.models import CollectionName, OrderStatus
from services.merchant_service.services.scope import (
    MERCHANT_FIELD,
    ByStore,
    ScopeContext,
    StoreResolver,
    scope_predicate,
)

logger = get_logger(__name__)

RecordInput = Union[Mapping[str, Any], BaseModel]


def cap_text(value: Optional[str], limit: int) -> Optional[str]:
    """Silently truncate ``value`` to ``limit`` characters."""
    if isinstance(value, str) and len(value) > limit:
        return value[:limit]
    return value


def to_storage(record: RecordInput) -> Record:
    """
    Convert an application record into the shape sent to the record store.

    The application-facing ``id`` is folded back into ``objectId`` and
    dropped, so it never becomes a column of its own.
    """
    if isinstance(record, BaseModel):
        data = record.model_dump(by_alias=True, exclude_none=True, mode="json")
    else:
        data = dict(record)
    app_id = data.pop("id", None)
    if app_id and not data.get(OBJECT_ID):
        data[OBJECT_ID] = app_id
    return data


class ScopedCollection:
    """
    list / save / delete for one store-owned collection.

    Reads are scoped to the account's store when it has one and fall back to
    the account id otherwise, so screens rendered mid-onboarding get an empty
    list instead of an error. Writes always require a store.
    """

    label = "Record"
    description_fields: tuple[str, ...] = ("description",)
    missing_store_message = "Please create a store profile first."

    def __init__(
        self,
        store: RecordStore,
        resolver: StoreResolver,
        name: CollectionName,
        description_limit: Optional[int] = None,
    ):
        self.store = store
        self.resolver = resolver
        self.name = name
        if description_limit is None:
            description_limit = get_settings().DESCRIPTION_MAX_LENGTH
        self.description_limit = description_limit

    @property
    def table(self) -> str:
        return self.name.table

    async def list(self, account_id: str) -> Iterator[Record]:
        """Records visible to the account, as a single-pass iterator."""
        scope = await self.resolver.scope_for(account_id)
        return await self.list_in(scope)

    async def list_in(self, scope: ScopeContext) -> Iterator[Record]:
        where = scope_predicate(scope)
        try:
            rows = await self.store.find(self.table, where)
        except TableNotFoundError:
            logger.warning(f"Table '{self.table}' not found. Returning empty list.")
            rows = []
        return (normalize_record(row) for row in rows)

    async def get(self, object_id: str, account_id: str) -> Optional[Record]:
        """One record of the account's store, or None."""
        store_id = await self._require_store(account_id)
        try:
            rows = await self.store.find(
                self.table,
                (Field(OBJECT_ID) == object_id) & scope_predicate(ByStore(store_id)),
            )
        except TableNotFoundError:
            return None
        return normalize_record(rows[0]) if rows else None

    def prepare(self, record: Record) -> Record:
        """Apply write-time defaults and limits before the record is stored."""
        for field in self.description_fields:
            if field in record:
                record[field] = cap_text(record[field], self.description_limit)
        return record

    async def save(self, record: RecordInput, account_id: str) -> Record:
        """
        Create or update a record owned by the account's store.

        The owning-store reference is always overwritten with the resolved
        store id, whatever the caller supplied. A record carrying an id is
        only updated when it already belongs to that store.

        Raises:
            StoreNotFoundError: the account has not created a store profile.
            StoreAccessError: the id names a record of another store, or no
                record at all.
        """
        store_id = await self._require_store(account_id)
        data = self.prepare(to_storage(record))
        object_id = data.get(OBJECT_ID)
        if object_id and await self.get(object_id, account_id) is None:
            raise StoreAccessError(
                f"{self.label} {object_id} does not belong to your store"
            )
        data[MERCHANT_FIELD] = store_id

        saved = await self.store.save(self.table, data)
        logger.info(f"Saved {self.name.value} record {saved.get(OBJECT_ID)} for store {store_id}")
        return normalize_record(saved)

    async def delete(self, record: RecordInput, account_id: Optional[str] = None) -> None:
        """
        Remove a record by its storage id.

        When ``account_id`` is given the record must belong to that account's
        store, otherwise StoreAccessError is raised and nothing is removed.
        """
        data = to_storage(record)
        object_id = data.get(OBJECT_ID)
        if account_id is not None:
            if object_id is None or await self.get(object_id, account_id) is None:
                raise StoreAccessError(
                    f"{self.label} {object_id} does not belong to your store"
                )
        await self.store.remove(self.table, data)
        logger.info(f"Deleted {self.name.value} record {object_id}")

    async def _require_store(self, account_id: str) -> str:
        store_id = await self.resolver.resolve_store(account_id)
        if not store_id:
            raise StoreNotFoundError(self.missing_store_message)
        return store_id


class CategoryCollection(ScopedCollection):
    label = "Category"

    def __init__(self, store: RecordStore, resolver: StoreResolver, **kwargs):
        super().__init__(store, resolver, CollectionName.CATEGORIES, **kwargs)

    def prepare(self, record: Record) -> Record:
        record.setdefault("productCount", 0)
        return super().prepare(record)


class ProductCollection(ScopedCollection):
    label = "Product"
    missing_store_message = (
        "Please create a store profile first before adding products."
    )

    def __init__(self, store: RecordStore, resolver: StoreResolver, **kwargs):
        super().__init__(store, resolver, CollectionName.PRODUCTS, **kwargs)

    def prepare(self, record: Record) -> Record:
        if record.get("isAvailable") is None:
            record["isAvailable"] = True
        record["description"] = record.get("description") or ""
        return super().prepare(record)


class OrderCollection(ScopedCollection):
    label = "Order"
    missing_store_message = "Store profile missing"

    def __init__(self, store: RecordStore, resolver: StoreResolver, **kwargs):
        super().__init__(store, resolver, CollectionName.ORDERS, **kwargs)

    def prepare(self, record: Record) -> Record:
        record.setdefault("status", OrderStatus.PENDING.value)
        if record.get("totalAmount") is None:
            record["totalAmount"] = round(
                sum(
                    float(item.get("price", 0)) * int(item.get("quantity", 0))
                    for item in record.get("items") or []
                ),
                2,
            )
        return super().prepare(record)

    async def update_status(
        self, order_id: str, status: OrderStatus, account_id: str
    ) -> Record:
        """Move an order of the account's store to ``status``."""
        order = await self.get(order_id, account_id)
        if order is None:
            raise StoreAccessError(f"Order {order_id} does not belong to your store")
        order["status"] = OrderStatus(status).value
        return await self.save(order, account_id)
