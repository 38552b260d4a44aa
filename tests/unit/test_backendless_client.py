"""Unit tests for the Backendless REST client and record store.

HTTP is served by httpx.MockTransport; nothing leaves the process.
"""

import json

import httpx
import pytest
from libs.baas.backendless import BackendlessClient, BackendlessRecordStore
from libs.baas.errors import AuthenticationError, BackendError, TableNotFoundError
from libs.baas.filters import Field
from libs.baas.identity import BackendlessIdentity
from services.merchant_service.services.scope import StoreResolver

APP_PREFIX = "/APP-ID/REST-KEY"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _client(handler, user_token=None) -> BackendlessClient:
    return BackendlessClient(
        app_id="APP-ID",
        api_key="REST-KEY",
        base_url="https://api.example.com/",
        user_token=user_token,
        http=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _error(status_code, code, message):
    return httpx.Response(status_code, json={"code": code, "message": message})


# ---------------------------------------------------------------------------
# Data service
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_sends_where_clause_and_token():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        seen["where"] = request.url.params.get("where")
        seen["page_size"] = request.url.params.get("pageSize")
        seen["token"] = request.headers.get("user-token")
        return httpx.Response(200, json=[{"objectId": "C1", "name": "Hats"}])

    store = BackendlessRecordStore(_client(handler, user_token="TOKEN"), page_size=50)

    rows = await store.find("Categories", Field("merchantId") == "S'1")

    assert rows == [{"objectId": "C1", "name": "Hats"}]
    assert seen == {
        "path": f"{APP_PREFIX}/data/Categories",
        "where": "merchantId = 'S''1'",
        "page_size": "50",
        "token": "TOKEN",
    }


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_follows_offsets_until_a_short_page():
    products = [{"objectId": f"P{i}"} for i in range(5)]
    offsets = []

    def handler(request: httpx.Request):
        offset = int(request.url.params["offset"])
        offsets.append(offset)
        return httpx.Response(200, json=products[offset:offset + 2])

    rows = await BackendlessRecordStore(_client(handler), page_size=2).find("Products")

    assert rows == products
    assert offsets == [0, 2, 4]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_table_not_found_code_is_mapped():
    store = BackendlessRecordStore(
        _client(lambda request: _error(400, 1009, "Table not found by name 'StoreInfo'"))
    )

    with pytest.raises(TableNotFoundError):
        await store.find("StoreInfo")

    assert await StoreResolver(store).resolve_store("ACCOUNT-1") is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_table_not_found_message_is_mapped():
    store = BackendlessRecordStore(
        _client(lambda request: _error(404, 1000, "Table not found by name 'Orders'"))
    )

    with pytest.raises(TableNotFoundError):
        await store.find("Orders")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_other_errors_keep_backend_details():
    store = BackendlessRecordStore(_client(lambda request: _error(500, 8000, "Boom")))

    with pytest.raises(BackendError) as exc_info:
        await store.find("Orders")

    assert not isinstance(exc_info.value, TableNotFoundError)
    assert exc_info.value.status_code == 500
    assert exc_info.value.backend_code == 8000
    assert exc_info.value.message == "Boom"


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "status_code,code", [(401, 3064), (400, 3003), (401, None)]
)
async def test_auth_failures_are_mapped(status_code, code):
    client = _client(lambda request: _error(status_code, code, "Not allowed"))

    with pytest.raises(AuthenticationError):
        await client.request("GET", "/data/Orders")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_network_errors_become_backend_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendError):
        await BackendlessRecordStore(_client(handler)).find("Orders")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_creates_then_updates():
    calls = []

    def handler(request: httpx.Request):
        body = json.loads(request.content)
        calls.append((request.method, request.url.path))
        return httpx.Response(200, json={"objectId": body.get("objectId") or "NEW", **body})

    store = BackendlessRecordStore(_client(handler))

    created = await store.save("Products", {"name": "Cap"})
    await store.save("Products", {**created, "name": "Hat"})

    assert calls == [
        ("POST", f"{APP_PREFIX}/data/Products"),
        ("PUT", f"{APP_PREFIX}/data/Products/NEW"),
    ]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_remove_uses_object_id():
    calls = []

    def handler(request: httpx.Request):
        calls.append((request.method, request.url.path))
        return httpx.Response(200, json={"deletionTime": 1})

    await BackendlessRecordStore(_client(handler)).remove("Products", {"id": "P1"})

    assert calls == [("DELETE", f"{APP_PREFIX}/data/Products/P1")]


@pytest.mark.unit
def test_client_requires_credentials():
    with pytest.raises(ValueError):
        BackendlessClient()


# ---------------------------------------------------------------------------
# User service
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_login_stores_token_and_builds_account():
    def handler(request: httpx.Request):
        assert request.url.path == f"{APP_PREFIX}/users/login"
        assert json.loads(request.content) == {"login": "a@example.com", "password": "pw"}
        return httpx.Response(
            200,
            json={
                "objectId": "U1",
                "email": "a@example.com",
                "firstName": "Ada",
                "lastName": "King",
                "user-token": "TOKEN",
            },
        )

    client = _client(handler)
    session = await BackendlessIdentity(client).login("a@example.com", "pw")

    assert session.user_token == "TOKEN"
    assert session.account.id == "U1"
    assert session.account.name == "Ada King"
    assert client.user_token == "TOKEN"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_current_account_checks_token_then_loads_user():
    def handler(request: httpx.Request):
        if request.url.path.endswith("/users/isvalidusertoken/TOKEN"):
            return httpx.Response(200, json=True)
        assert request.url.path == f"{APP_PREFIX}/data/Users/U1"
        return httpx.Response(200, json={"objectId": "U1", "email": "a@example.com"})

    identity = BackendlessIdentity(_client(handler, user_token="TOKEN"), user_id="U1")

    account = await identity.get_current_account()

    assert account.id == "U1"
    assert account.name == "Merchant"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_expired_token_has_no_account():
    identity = BackendlessIdentity(
        _client(lambda request: httpx.Response(200, json=False), user_token="OLD"),
        user_id="U1",
    )

    assert await identity.get_current_account() is None
    assert await BackendlessIdentity(_client(lambda r: None)).get_current_account() is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_splits_display_name():
    seen = {}

    def handler(request: httpx.Request):
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"objectId": "U2", **seen})

    account = await BackendlessIdentity(_client(handler)).register(
        "b@example.com", "secret1", "Grace Brewster Hopper"
    )

    assert seen["firstName"] == "Grace"
    assert seen["lastName"] == "Brewster Hopper"
    assert account.name == "Grace Brewster Hopper"
