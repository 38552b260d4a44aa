"""Unit tests for the in-process record store."""

import pytest
from libs.baas.errors import BackendError, TableNotFoundError
from libs.baas.filters import Field
from libs.baas.store import MemoryRecordStore, normalize_record, record_object_id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_on_unknown_table_raises_table_not_found():
    store = MemoryRecordStore()

    with pytest.raises(TableNotFoundError) as exc_info:
        await store.find("Categories")

    assert exc_info.value.backend_code == 1009


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_assigns_object_id_and_creates_table():
    store = MemoryRecordStore()

    saved = await store.save("Categories", {"name": "Shoes"})

    assert saved["objectId"]
    assert "created" in saved and "updated" in saved
    assert await store.find("Categories") == [saved]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_with_object_id_updates_in_place():
    store = MemoryRecordStore()
    saved = await store.save("Categories", {"name": "Shoes", "productCount": 3})

    updated = await store.save(
        "Categories", {"objectId": saved["objectId"], "name": "Boots"}
    )

    rows = await store.find("Categories")
    assert len(rows) == 1
    assert updated["name"] == "Boots"
    assert updated["productCount"] == 3


@pytest.mark.asyncio
@pytest.mark.unit
async def test_returned_records_are_copies():
    store = MemoryRecordStore()
    saved = await store.save("Products", {"name": "Hat"})
    saved["name"] = "Changed"

    rows = await store.find("Products", Field("objectId") == saved["objectId"])
    assert rows[0]["name"] == "Hat"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_remove_accepts_id_and_rejects_unknown_records():
    store = MemoryRecordStore()
    saved = await store.save("Products", {"name": "Hat"})

    await store.remove("Products", {"id": saved["objectId"]})
    assert await store.find("Products") == []

    with pytest.raises(BackendError):
        await store.remove("Products", {"objectId": "missing"})


@pytest.mark.unit
def test_normalize_record_copies_object_id():
    record = {"objectId": "X1", "name": "Hat"}

    normalized = normalize_record(record)

    assert normalized["id"] == "X1"
    assert "id" not in record
    assert record_object_id({"id": "Y"}) == "Y"
