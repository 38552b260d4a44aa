"""Console session state.

The console moves through three states:

    UNAUTHENTICATED --sign_in--> ONBOARDING --complete_onboarding--> AUTHENTICATED
    UNAUTHENTICATED --sign_in (profile exists)--> AUTHENTICATED
    any --sign_out--> UNAUTHENTICATED

There is no way back from AUTHENTICATED to ONBOARDING: once a store profile
exists it is never "un-onboarded".
"""

import asyncio
from typing import Optional

from libs.auth.models import Account
from libs.baas.errors import InvalidTransitionError
from libs.baas.store import Record
from libs.common.logging import get_logger
from services.merchant_service.models import AuthState
from services.merchant_service.services.console import Console

logger = get_logger(__name__)


class ConsoleState:
    """Single source of truth for one merchant's console session."""

    def __init__(self):
        self.auth_state = AuthState.UNAUTHENTICATED
        self.account: Optional[Account] = None
        self.profile: Optional[Record] = None
        self.categories: list[Record] = []
        self.products: list[Record] = []
        self.orders: list[Record] = []

    @classmethod
    async def restore(cls, console: Console, account: Optional[Account]) -> "ConsoleState":
        """Rebuild the state for an account from the backend."""
        state = cls()
        if account is not None:
            state.sign_in(account, await console.profiles.get_profile(account.id))
        return state

    def sign_in(self, account: Account, profile: Optional[Record]) -> AuthState:
        if self.auth_state is AuthState.AUTHENTICATED and profile is None:
            raise InvalidTransitionError("An onboarded session cannot return to onboarding")
        self.account = account
        self.profile = profile
        self.auth_state = (
            AuthState.AUTHENTICATED if profile is not None else AuthState.ONBOARDING
        )
        return self.auth_state

    def complete_onboarding(self, profile: Record) -> AuthState:
        if self.auth_state is AuthState.UNAUTHENTICATED:
            raise InvalidTransitionError("Sign in before setting up a store")
        self.profile = profile
        self.auth_state = AuthState.AUTHENTICATED
        return self.auth_state

    def sign_out(self) -> AuthState:
        self.auth_state = AuthState.UNAUTHENTICATED
        self.account = None
        self.profile = None
        self.categories, self.products, self.orders = [], [], []
        return self.auth_state

    async def load_data(self, console: Console) -> None:
        """
        Fetch categories, products and orders concurrently.

        All three must succeed; if any fails the error propagates and the
        previously loaded lists are left untouched.
        """
        if self.account is None:
            raise InvalidTransitionError("Sign in before loading store data")

        account_id = self.account.id
        categories, products, orders = await asyncio.gather(
            console.categories.list(account_id),
            console.products.list(account_id),
            console.orders.list(account_id),
        )
        loaded = (list(categories), list(products), list(orders))
        self.categories, self.products, self.orders = loaded
        logger.info(
            f"Loaded {len(self.categories)} categories, {len(self.products)} products, "
            f"{len(self.orders)} orders for account {account_id}"
        )
