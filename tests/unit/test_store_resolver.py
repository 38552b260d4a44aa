"""Unit tests for store resolution and scope contexts."""

import pytest
from libs.baas.errors import BackendError
from libs.baas.filters import Eq
from libs.baas.store import MemoryRecordStore
from services.merchant_service.services.scope import (
    ByAccount,
    ByStore,
    StoreResolver,
    Unscoped,
    scope_predicate,
)


class FailingStore(MemoryRecordStore):
    async def find(self, table, where=None):
        raise BackendError("Service unavailable", status_code=503)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_resolve_store_returns_none_when_table_missing():
    resolver = StoreResolver(MemoryRecordStore())

    assert await resolver.resolve_store("ACCOUNT-1") is None
    assert await resolver.scope_for("ACCOUNT-1") == ByAccount("ACCOUNT-1")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_resolve_store_returns_none_without_profile():
    store = MemoryRecordStore({"StoreInfo": [{"merchantId": "ACCOUNT-2", "storeName": "Other"}]})

    assert await StoreResolver(store).resolve_store("ACCOUNT-1") is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_resolve_store_returns_profile_object_id():
    store = MemoryRecordStore()
    profile = await store.save("StoreInfo", {"merchantId": "ACCOUNT-1", "storeName": "Shop"})
    resolver = StoreResolver(store)

    assert await resolver.resolve_store("ACCOUNT-1") == profile["objectId"]
    assert await resolver.scope_for("ACCOUNT-1") == ByStore(profile["objectId"])


@pytest.mark.asyncio
@pytest.mark.unit
async def test_duplicate_profiles_resolve_to_first(caplog):
    store = MemoryRecordStore()
    first = await store.save("StoreInfo", {"merchantId": "ACCOUNT-1", "storeName": "A"})
    await store.save("StoreInfo", {"merchantId": "ACCOUNT-1", "storeName": "B"})

    assert await StoreResolver(store).resolve_store("ACCOUNT-1") == first["objectId"]
    assert "owns 2 store profiles" in caplog.text


@pytest.mark.asyncio
@pytest.mark.unit
async def test_other_backend_errors_propagate():
    with pytest.raises(BackendError):
        await StoreResolver(FailingStore()).resolve_store("ACCOUNT-1")


@pytest.mark.unit
def test_scope_predicates():
    assert scope_predicate(ByStore("S1")) == Eq("merchantId", "S1")
    assert scope_predicate(ByAccount("A1")) == Eq("merchantId", "A1")
    with pytest.raises(ValueError):
        scope_predicate(Unscoped())
