"""Shared helpers for merchant console tests."""

from services.merchant_service.services.console import Console

TEST_ACCOUNT_ID = "ACCOUNT-1"
OTHER_ACCOUNT_ID = "ACCOUNT-2"


async def create_store(console: Console, account_id: str, name: str = "Corner Shop") -> str:
    """Create a store profile for the account and return its id."""
    profile = await console.profiles.save_profile(
        account_id, {"storeName": name, "storeType": "Clothing"}
    )
    return profile["id"]
