"""Console session routes: where the merchant is in the sign-in flow."""

from fastapi import APIRouter, Depends
from libs.auth.models import Account
from libs.baas.identity import IdentityProvider
from services.merchant_service.dependencies import (
    get_console,
    get_current_account,
    get_identity,
)
from services.merchant_service.schemas import ConsoleDataResponse, SessionResponse
from services.merchant_service.services.catalog import label_products
from services.merchant_service.services.console import Console
from services.merchant_service.services.state import ConsoleState

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=SessionResponse)
async def get_session(
    identity: IdentityProvider = Depends(get_identity),
    console: Console = Depends(get_console),
):
    """
    Auth state for the current request.

    ``unauthenticated`` without a valid session, ``onboarding`` until the
    account has a store profile, ``authenticated`` afterwards.
    """
    state = await ConsoleState.restore(console, await identity.get_current_account())
    return SessionResponse(
        auth_state=state.auth_state, account=state.account, profile=state.profile
    )


@router.post("/load", response_model=ConsoleDataResponse)
async def load_console_data(
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Categories, products and orders of the merchant's store in one call."""
    state = await ConsoleState.restore(console, account)
    await state.load_data(console)
    return ConsoleDataResponse(
        categories=state.categories,
        products=label_products(state.products, state.categories),
        orders=state.orders,
    )
