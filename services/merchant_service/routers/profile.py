"""Store profile routes: onboarding, settings, open/closed status."""

from fastapi import APIRouter, Depends, HTTPException, Request
from libs.auth.models import Account
from libs.baas.errors import StoreNotFoundError
from libs.common.rate_limit import ai_limit
from services.merchant_service import ai
from services.merchant_service.dependencies import get_console, get_current_account
from services.merchant_service.schemas import (
    InsightsResponse,
    ScheduleResult,
    StoreProfileCreate,
    StoreProfileResponse,
    StoreProfileUpdate,
    StoreStatusUpdate,
)
from services.merchant_service.services.console import Console
from services.merchant_service.services.state import ConsoleState

router = APIRouter(tags=["profile"])


async def _require_profile(console: Console, account: Account) -> dict:
    profile = await console.profiles.get_profile(account.id)
    if profile is None:
        raise StoreNotFoundError()
    return profile


@router.get("/profile", response_model=StoreProfileResponse)
async def get_profile(
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    profile = await console.profiles.get_profile(account.id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Store profile not found")
    return profile


@router.put("/profile", response_model=StoreProfileResponse)
async def save_profile(
    payload: StoreProfileCreate,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """
    Create the store profile, or replace its fields.

    This is the onboarding submit: afterwards the session is authenticated.
    """
    state = await ConsoleState.restore(console, account)
    profile = await console.profiles.save_profile(account.id, payload)
    state.complete_onboarding(profile)
    return profile


@router.patch("/profile", response_model=StoreProfileResponse)
async def update_profile(
    payload: StoreProfileUpdate,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Change some fields of an existing profile."""
    await _require_profile(console, account)
    return await console.profiles.save_profile(
        account.id, payload.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
    )


@router.post("/profile/status", response_model=StoreProfileResponse)
async def set_store_status(
    payload: StoreStatusUpdate,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Open or close the store by hand."""
    await _require_profile(console, account)
    return await console.profiles.set_store_open(account.id, payload.store_open)


@router.post("/profile/schedule", response_model=ScheduleResult)
async def apply_schedule(
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Open or close the store according to its opening hours."""
    profile, changed = await console.profiles.apply_schedule(account.id)
    if profile is None:
        raise StoreNotFoundError()
    return ScheduleResult(profile=profile, changed=changed)


@router.get("/insights", response_model=InsightsResponse)
@ai_limit
async def get_insights(
    request: Request,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Sales tips for the store, generated by the configured model."""
    profile = await _require_profile(console, account)
    insights = await ai.generate_store_insights(
        profile.get("storeName") or "My Store", profile.get("storeType") or "General Store"
    )
    return InsightsResponse(insights=insights)
