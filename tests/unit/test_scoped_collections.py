"""Unit tests for the store-scoped collection accessor."""

import pytest
from libs.baas.errors import StoreAccessError, StoreNotFoundError
from libs.baas.store import MemoryRecordStore
from services.merchant_service.schemas import CategoryCreate, OrderCreate, ProductCreate
from services.merchant_service.services.collections import CategoryCollection
from services.merchant_service.services.console import Console
from tests.helpers import OTHER_ACCOUNT_ID, TEST_ACCOUNT_ID, create_store


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_is_empty_when_table_missing(console):
    await create_store(console, TEST_ACCOUNT_ID)

    assert list(await console.products.list(TEST_ACCOUNT_ID)) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_without_store_is_scoped_to_account(console, record_store):
    await record_store.save("Categories", {"merchantId": TEST_ACCOUNT_ID, "name": "Early"})
    await record_store.save("Categories", {"merchantId": "SOMEONE-ELSE", "name": "Other"})

    names = [c["name"] for c in await console.categories.list(TEST_ACCOUNT_ID)]

    assert names == ["Early"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_never_leaks_other_stores(console):
    await create_store(console, TEST_ACCOUNT_ID)
    await create_store(console, OTHER_ACCOUNT_ID, name="Rival")
    await console.categories.save({"name": "Mine"}, TEST_ACCOUNT_ID)
    await console.categories.save({"name": "Theirs"}, OTHER_ACCOUNT_ID)

    mine = list(await console.categories.list(TEST_ACCOUNT_ID))
    theirs = list(await console.categories.list(OTHER_ACCOUNT_ID))

    assert [c["name"] for c in mine] == ["Mine"]
    assert [c["name"] for c in theirs] == ["Theirs"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_is_single_pass_and_normalised(console):
    await create_store(console, TEST_ACCOUNT_ID)
    await console.categories.save({"name": "Hats"}, TEST_ACCOUNT_ID)

    rows = await console.categories.list(TEST_ACCOUNT_ID)
    first_pass = list(rows)

    assert len(first_pass) == 1
    assert first_pass[0]["id"] == first_pass[0]["objectId"]
    assert list(rows) == []


# ---------------------------------------------------------------------------
# save
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_without_store_raises(console):
    with pytest.raises(StoreNotFoundError) as exc_info:
        await console.products.save(
            ProductCreate(name="Hat", price=10, category_id="C1"), TEST_ACCOUNT_ID
        )

    assert "create a store profile first" in exc_info.value.message


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_overwrites_merchant_id_with_store(console):
    store_id = await create_store(console, TEST_ACCOUNT_ID)

    saved = await console.categories.save(
        {"name": "Hats", "merchantId": "FORGED"}, TEST_ACCOUNT_ID
    )

    assert saved["merchantId"] == store_id
    assert saved["id"] == saved["objectId"]
    assert saved["productCount"] == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_truncates_long_descriptions(console):
    await create_store(console, TEST_ACCOUNT_ID)

    saved = await console.categories.save(
        CategoryCreate(name="Hats", description="x" * 600), TEST_ACCOUNT_ID
    )

    assert len(saved["description"]) == 500


@pytest.mark.asyncio
@pytest.mark.unit
async def test_zero_description_limit_is_respected(console, record_store):
    await create_store(console, TEST_ACCOUNT_ID)
    categories = CategoryCollection(record_store, console.resolver, description_limit=0)

    saved = await categories.save({"name": "Hats", "description": "Warm"}, TEST_ACCOUNT_ID)

    assert saved["description"] == ""


@pytest.mark.asyncio
@pytest.mark.unit
async def test_product_description_of_520_chars_keeps_first_500(console, record_store):
    await create_store(console, TEST_ACCOUNT_ID)
    description = "a" * 500 + "b" * 20

    await console.products.save(
        ProductCreate(name="Hat", price=10, category_id="C1", description=description),
        TEST_ACCOUNT_ID,
    )

    stored = (await record_store.find("Products"))[0]
    assert stored["description"] == "a" * 500


@pytest.mark.asyncio
@pytest.mark.unit
async def test_product_defaults(console):
    await create_store(console, TEST_ACCOUNT_ID)

    saved = await console.products.save(
        ProductCreate(name="Hat", price=12.5, category_id="C1"), TEST_ACCOUNT_ID
    )

    assert saved["isAvailable"] is True
    assert saved["description"] == ""
    assert saved["categoryId"] == "C1"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_with_id_updates_existing_record(console, record_store):
    await create_store(console, TEST_ACCOUNT_ID)
    created = await console.categories.save({"name": "Hats"}, TEST_ACCOUNT_ID)

    updated = await console.categories.save(
        CategoryCreate(id=created["id"], name="Caps"), TEST_ACCOUNT_ID
    )

    assert updated["id"] == created["id"]
    assert "id" not in (await record_store.find("Categories"))[0]
    assert [c["name"] for c in await console.categories.list(TEST_ACCOUNT_ID)] == ["Caps"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_order_total_computed_from_items(console):
    await create_store(console, TEST_ACCOUNT_ID)
    order = OrderCreate(
        customer_name="Sarah Johnson",
        customer_email="sarah.j@example.com",
        items=[
            {"product_id": "P1", "product_name": "Shirt", "quantity": 2, "price": 24.99},
            {"product_id": "P2", "product_name": "Jacket", "quantity": 1, "price": 89.99},
        ],
    )

    saved = await console.orders.save(order, TEST_ACCOUNT_ID)

    assert saved["totalAmount"] == pytest.approx(139.97)
    assert saved["status"] == "Pending"
    assert saved["items"][0]["productName"] == "Shirt"


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_removes_own_record(console):
    await create_store(console, TEST_ACCOUNT_ID)
    saved = await console.categories.save({"name": "Hats"}, TEST_ACCOUNT_ID)

    await console.categories.delete(saved, TEST_ACCOUNT_ID)

    assert list(await console.categories.list(TEST_ACCOUNT_ID)) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_rejects_records_of_other_stores(console):
    await create_store(console, TEST_ACCOUNT_ID)
    await create_store(console, OTHER_ACCOUNT_ID, name="Rival")
    theirs = await console.categories.save({"name": "Theirs"}, OTHER_ACCOUNT_ID)

    with pytest.raises(StoreAccessError):
        await console.categories.delete({"id": theirs["id"]}, TEST_ACCOUNT_ID)

    assert len(list(await console.categories.list(OTHER_ACCOUNT_ID))) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_rejects_ids_of_other_stores(console, record_store):
    await create_store(console, TEST_ACCOUNT_ID)
    await create_store(console, OTHER_ACCOUNT_ID, name="Rival")
    theirs = await console.categories.save({"name": "Victim"}, OTHER_ACCOUNT_ID)

    with pytest.raises(StoreAccessError):
        await console.categories.save(
            CategoryCreate(id=theirs["id"], name="Hijacked"), TEST_ACCOUNT_ID
        )

    assert [c["name"] for c in await console.categories.list(OTHER_ACCOUNT_ID)] == ["Victim"]
    assert list(await console.categories.list(TEST_ACCOUNT_ID)) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_rejects_unknown_ids(console, record_store):
    await create_store(console, TEST_ACCOUNT_ID)

    with pytest.raises(StoreAccessError):
        await console.products.save(
            {"id": "NO-SUCH-PRODUCT", "name": "Cap", "price": 5}, TEST_ACCOUNT_ID
        )

    assert "Products" not in record_store.tables()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_order_status(console):
    await create_store(console, TEST_ACCOUNT_ID)
    order = await console.orders.save(
        {
            "customerName": "Mike Chen",
            "customerEmail": "mike.c@example.com",
            "items": [{"productId": "P1", "productName": "Shirt", "quantity": 1, "price": 10}],
        },
        TEST_ACCOUNT_ID,
    )

    shipped = await console.orders.update_status(order["id"], "Shipped", TEST_ACCOUNT_ID)

    assert shipped["status"] == "Shipped"
    assert shipped["totalAmount"] == 10


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_status_of_foreign_order_is_rejected(console):
    await create_store(console, TEST_ACCOUNT_ID)
    await create_store(console, OTHER_ACCOUNT_ID, name="Rival")
    order = await console.orders.save(
        {"customerName": "X", "customerEmail": "x@example.com", "items": []},
        OTHER_ACCOUNT_ID,
    )

    with pytest.raises(StoreAccessError):
        await console.orders.update_status(order["id"], "Cancelled", TEST_ACCOUNT_ID)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_independent_consoles_share_the_backend():
    store = MemoryRecordStore()
    await create_store(Console.build(store), TEST_ACCOUNT_ID)

    saved = await Console.build(store).categories.save({"name": "Hats"}, TEST_ACCOUNT_ID)

    assert saved["merchantId"] == (await store.find("StoreInfo"))[0]["objectId"]
