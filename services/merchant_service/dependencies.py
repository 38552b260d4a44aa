"""FastAPI dependencies choosing between Backendless and demo mode."""

from functools import lru_cache
from typing import AsyncGenerator

from fastapi import Depends
from libs.auth.dependencies import get_session_credentials
from libs.auth.models import Account, SessionCredentials
from libs.baas.backendless import BackendlessClient, BackendlessRecordStore
from libs.baas.errors import AuthenticationError
from libs.baas.identity import BackendlessIdentity, IdentityProvider
from libs.baas.store import MemoryRecordStore
from libs.common.config import get_settings
from libs.db.session import get_async_db
from services.merchant_service.demo import (
    DemoIdentity,
    DemoWorkspace,
    LocalKeyValueStore,
)
from services.merchant_service.services.console import Console
from sqlalchemy.ext.asyncio import AsyncSession


@lru_cache
def get_demo_store() -> MemoryRecordStore:
    """Process-wide record store used while Backendless is not configured."""
    return MemoryRecordStore()


async def get_identity(
    credentials: SessionCredentials = Depends(get_session_credentials),
    db: AsyncSession = Depends(get_async_db),
) -> IdentityProvider:
    if get_settings().backendless_configured:
        client = BackendlessClient(user_token=credentials.user_token)
        return BackendlessIdentity(client, user_id=credentials.user_id)
    return DemoIdentity(LocalKeyValueStore(db), user_token=credentials.user_token)


async def get_console(
    credentials: SessionCredentials = Depends(get_session_credentials),
    db: AsyncSession = Depends(get_async_db),
    demo_store: MemoryRecordStore = Depends(get_demo_store),
) -> AsyncGenerator[Console, None]:
    if get_settings().backendless_configured:
        store = BackendlessRecordStore(
            BackendlessClient(user_token=credentials.user_token)
        )
        try:
            yield Console.build(store)
        finally:
            await store.aclose()
        return

    workspace = DemoWorkspace(LocalKeyValueStore(db), demo_store)
    await workspace.restore()
    yield Console.build(workspace.store, mirror=workspace)


async def get_current_account(
    identity: IdentityProvider = Depends(get_identity),
) -> Account:
    """The signed-in merchant; 401 when the session is missing or expired."""
    account = await identity.get_current_account()
    if account is None:
        raise AuthenticationError("Not authenticated")
    return account
