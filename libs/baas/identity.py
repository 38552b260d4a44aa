"""Session identity providers.

The console never authenticates merchants itself; it asks an identity
provider for the current account and forwards login/register/logout.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from libs.auth.models import Account, AuthSession
from libs.baas.backendless import USER_TOKEN_HEADER, BackendlessClient
from libs.baas.errors import AuthenticationError
from libs.common.logging import get_logger

logger = get_logger(__name__)


def split_display_name(name: str) -> tuple[Optional[str], Optional[str]]:
    """Split "Ada Lovelace King" into ("Ada", "Lovelace King")."""
    parts = name.split()
    if not parts:
        return None, None
    return parts[0], (" ".join(parts[1:]) or None)


class IdentityProvider(ABC):
    """Session-bound access to the authenticated account."""

    @abstractmethod
    async def get_current_account(self) -> Optional[Account]:
        """The signed-in account, or None when there is no valid session."""

    @abstractmethod
    async def login(self, email: str, password: str) -> AuthSession: ...

    @abstractmethod
    async def register(self, email: str, password: str, name: str) -> Account: ...

    @abstractmethod
    async def logout(self) -> None: ...

    @abstractmethod
    async def update_account(self, fields: dict[str, Any]) -> Account: ...

    @abstractmethod
    async def restore_password(self, email: str) -> None: ...


class BackendlessIdentity(IdentityProvider):
    """Identity provider backed by the Backendless user service."""

    def __init__(self, client: BackendlessClient, user_id: Optional[str] = None):
        self.client = client
        self.user_id = user_id

    async def get_current_account(self) -> Optional[Account]:
        if not self.client.user_token or not self.user_id:
            return None
        if not await self.client.is_valid_user_token(self.client.user_token):
            logger.info("Rejected expired user token")
            return None
        return Account.from_backend(await self.client.get_user(self.user_id))

    async def login(self, email: str, password: str) -> AuthSession:
        user = await self.client.login(email, password)
        token = user.get(USER_TOKEN_HEADER)
        if not token:
            raise AuthenticationError("Login response did not include a session token")
        account = Account.from_backend(user)
        self.user_id = account.id
        logger.info(f"Account {account.id} signed in")
        return AuthSession(account=account, user_token=token)

    async def register(self, email: str, password: str, name: str) -> Account:
        first_name, last_name = split_display_name(name)
        user: dict[str, Any] = {"email": email, "password": password, "name": name}
        if first_name:
            user["firstName"] = first_name
        if last_name:
            user["lastName"] = last_name
        return Account.from_backend(await self.client.register(user))

    async def logout(self) -> None:
        if not self.client.user_token:
            return
        await self.client.logout()
        self.user_id = None

    async def update_account(self, fields: dict[str, Any]) -> Account:
        if not self.client.user_token or not self.user_id:
            raise AuthenticationError("No user logged in")
        return Account.from_backend(await self.client.update_user(self.user_id, fields))

    async def restore_password(self, email: str) -> None:
        await self.client.restore_password(email)
