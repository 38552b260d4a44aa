"""Store profile find-or-create.

Each account owns at most one StoreInfo record. Saves for the same account
are serialised, so the lookup and the write behave as one conditional write
within a process: two concurrent first saves produce a single profile.
"""

import asyncio
import weakref
from datetime import datetime
from typing import Any, Optional, Protocol

from libs.baas.store import OBJECT_ID, Record, RecordStore, normalize_record
from libs.common.config import get_settings
from libs.common.datetime_utils import store_now
from libs.common.logging import get_logger
from services.merchant_service.models import STORE_PROFILE_TABLE
from services.merchant_service.services.collections import (
    RecordInput,
    cap_text,
    to_storage,
)
from services.merchant_service.services.schedule import scheduled_status
from services.merchant_service.services.scope import MERCHANT_FIELD, StoreResolver

logger = get_logger(__name__)

_profile_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
    weakref.WeakValueDictionary()
)


def _lock_for(account_id: str) -> asyncio.Lock:
    lock = _profile_locks.get(account_id)
    if lock is None:
        lock = asyncio.Lock()
        _profile_locks[account_id] = lock
    return lock


class ProfileMirror(Protocol):
    """Something that keeps a local copy of the saved profile."""

    async def remember_profile(self, profile: Record) -> None: ...


class ProfileService:
    def __init__(
        self,
        store: RecordStore,
        resolver: StoreResolver,
        mirror: Optional[ProfileMirror] = None,
        description_limit: Optional[int] = None,
    ):
        self.store = store
        self.resolver = resolver
        self.mirror = mirror
        if description_limit is None:
            description_limit = get_settings().DESCRIPTION_MAX_LENGTH
        self.description_limit = description_limit

    async def get_profile(self, account_id: str) -> Optional[Record]:
        profile = await self.resolver.find_profile(account_id)
        return normalize_record(profile) if profile else None

    async def save_profile(self, account_id: str, profile_data: RecordInput) -> Record:
        """
        Update the account's profile, or create it when none exists.

        Caller fields win over stored ones; the stored ``objectId`` is kept
        and ``merchantId`` always names the account.
        """
        data = to_storage(profile_data)
        # Identity fields are owned by the store, not the caller.
        data.pop(OBJECT_ID, None)
        data.pop(MERCHANT_FIELD, None)

        async with _lock_for(account_id):
            existing = await self.resolver.find_profile(account_id)
            record: dict[str, Any] = {**existing, **data} if existing else data
            record[MERCHANT_FIELD] = account_id
            if "description" in record:
                record["description"] = cap_text(
                    record["description"], self.description_limit
                )
            saved = await self.store.save(STORE_PROFILE_TABLE, record)

        profile = normalize_record(saved)
        if existing:
            logger.info(f"Updated store profile {profile['id']} for account {account_id}")
        else:
            logger.info(f"Created store profile {profile['id']} for account {account_id}")

        if self.mirror is not None:
            await self.mirror.remember_profile(profile)
        return profile

    async def set_store_open(self, account_id: str, store_open: bool) -> Record:
        return await self.save_profile(account_id, {"storeOpen": store_open})

    async def apply_schedule(
        self, account_id: str, now: Optional[datetime] = None
    ) -> tuple[Optional[Record], bool]:
        """
        Flip the open/closed flag to match the opening hours.

        Returns the (possibly updated) profile and whether it changed. Does
        nothing when auto-schedule is off or the flag already matches.
        """
        profile = await self.get_profile(account_id)
        if profile is None:
            return None, False

        wanted = scheduled_status(profile, now or store_now())
        if wanted is None or bool(profile.get("storeOpen", True)) == wanted:
            return profile, False

        logger.info(
            f"Auto-schedule {'opening' if wanted else 'closing'} store {profile['id']}"
        )
        return await self.set_store_open(account_id, wanted), True
