"""
Backendless REST client.

Provides async access to:
- Data tables (find / save / remove) through BackendlessRecordStore
- The user service (login, register, logout, token validation, updates)

All calls are single-attempt: failures surface as BackendError subclasses
and are never retried here.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx
from libs.baas.errors import (
    INVALID_LOGIN_CODE,
    INVALID_USER_TOKEN_CODE,
    AuthenticationError,
    BackendError,
    TableNotFoundError,
)
from libs.baas.filters import Predicate, where_clause
from libs.baas.store import OBJECT_ID, Record, RecordStore, record_object_id
from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

USER_TOKEN_HEADER = "user-token"
_AUTH_ERROR_CODES = {INVALID_LOGIN_CODE, INVALID_USER_TOKEN_CODE, 3048}


class BackendlessClient:
    """Async client for one Backendless application.

    The optional ``user_token`` is sent with every request so that table
    permissions are evaluated for the signed-in merchant.
    """

    def __init__(
        self,
        app_id: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        user_token: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.app_id = app_id or settings.BACKENDLESS_APP_ID
        self.api_key = api_key or settings.BACKENDLESS_API_KEY
        if not self.app_id or not self.api_key:
            raise ValueError("BACKENDLESS_APP_ID and BACKENDLESS_API_KEY are required")
        self.base_url = (base_url or settings.BACKENDLESS_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.BACKENDLESS_TIMEOUT
        self.user_token = user_token
        self._http = http

    @property
    def app_url(self) -> str:
        return f"{self.base_url}/{self.app_id}/{self.api_key}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.user_token:
            headers[USER_TOKEN_HEADER] = self.user_token
        return headers

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json_data: Any = None,
    ) -> Any:
        """Make a request against the application and return decoded JSON."""
        url = f"{self.app_url}{path}"
        try:
            if self._http is not None:
                response = await self._http.request(
                    method, url, headers=self._headers(), params=params, json=json_data
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(
                        method, url, headers=self._headers(), params=params, json=json_data
                    )
        except httpx.HTTPError as e:
            logger.error(f"Backendless {method} {path} failed: {e}")
            raise BackendError(f"Backendless request failed: {e}") from e

        data = self._decode(response)

        if not response.is_success:
            body = data if isinstance(data, dict) else {}
            backend_code = body.get("code")
            message = body.get("message") or f"Backendless returned HTTP {response.status_code}"

            if TableNotFoundError.matches(backend_code, message):
                raise TableNotFoundError(
                    message,
                    status_code=response.status_code,
                    backend_code=backend_code,
                    response_data=body,
                )
            if response.status_code == 401 or backend_code in _AUTH_ERROR_CODES:
                raise AuthenticationError(message)

            logger.error(
                f"Backendless API error: {response.status_code} - {body}",
            )
            raise BackendError(
                message,
                status_code=response.status_code,
                backend_code=backend_code,
                response_data=body,
            )

        return data

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            if response.is_success:
                raise BackendError(
                    "Malformed response from Backendless",
                    status_code=response.status_code,
                ) from e
            return None

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()

    # =========================================================================
    # User service
    # =========================================================================

    async def login(self, login: str, password: str) -> dict:
        """Sign in; the returned user carries the session ``user-token``."""
        user = await self.request(
            "POST", "/users/login", json_data={"login": login, "password": password}
        )
        self.user_token = user.get(USER_TOKEN_HEADER)
        return user

    async def register(self, user: dict) -> dict:
        return await self.request("POST", "/users/register", json_data=user)

    async def logout(self) -> None:
        try:
            await self.request("GET", "/users/logout")
        finally:
            self.user_token = None

    async def is_valid_user_token(self, token: str) -> bool:
        result = await self.request("GET", f"/users/isvalidusertoken/{quote(token, safe='')}")
        return result is True

    async def get_user(self, object_id: str) -> dict:
        return await self.request("GET", f"/data/Users/{quote(object_id, safe='')}")

    async def update_user(self, object_id: str, fields: dict) -> dict:
        return await self.request(
            "PUT", f"/users/{quote(object_id, safe='')}", json_data=fields
        )

    async def restore_password(self, email: str) -> None:
        await self.request("GET", f"/users/restorepassword/{quote(email, safe='')}")


class BackendlessRecordStore(RecordStore):
    """RecordStore backed by Backendless data tables."""

    def __init__(self, client: BackendlessClient, page_size: Optional[int] = None):
        self.client = client
        self.page_size = page_size or get_settings().BACKENDLESS_PAGE_SIZE

    async def find(self, table: str, where: Optional[Predicate] = None) -> list[Record]:
        """Every matching record, fetched page by page."""
        params: dict[str, Any] = {"pageSize": self.page_size}
        clause = where_clause(where)
        if clause:
            params["where"] = clause

        rows: list[Record] = []
        while True:
            params["offset"] = len(rows)
            page = await self.client.request("GET", f"/data/{table}", params=params)
            if not isinstance(page, list):
                raise BackendError(f"Malformed find response for table '{table}'")
            rows.extend(page)
            if len(page) < self.page_size:
                return rows

    async def save(self, table: str, record: Record) -> Record:
        object_id = record.get(OBJECT_ID)
        if object_id:
            saved = await self.client.request(
                "PUT", f"/data/{table}/{quote(object_id, safe='')}", json_data=record
            )
        else:
            saved = await self.client.request("POST", f"/data/{table}", json_data=record)
        if not isinstance(saved, dict) or not saved.get(OBJECT_ID):
            raise BackendError(f"Malformed save response for table '{table}'")
        return saved

    async def remove(self, table: str, record: Record) -> None:
        object_id = record_object_id(record)
        if not object_id:
            raise BackendError(f"Cannot remove a '{table}' record without an objectId")
        await self.client.request("DELETE", f"/data/{table}/{quote(object_id, safe='')}")

    async def aclose(self) -> None:
        await self.client.aclose()
