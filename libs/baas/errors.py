"""Error taxonomy for backend access and store-scoped operations."""

from typing import Optional

# Backendless error codes the console reacts to.
TABLE_NOT_FOUND_CODE = 1009
INVALID_LOGIN_CODE = 3003
INVALID_USER_TOKEN_CODE = 3064


class ConsoleError(Exception):
    """Base exception carrying a user-facing message and a stable code."""

    code = "CONSOLE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BackendError(ConsoleError):
    """The BaaS rejected a request or returned something unusable."""

    code = "BACKEND_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        backend_code: Optional[int] = None,
        response_data: Optional[dict] = None,
    ):
        self.status_code = status_code
        self.backend_code = backend_code
        self.response_data = response_data or {}
        super().__init__(message)


class TableNotFoundError(BackendError):
    """The collection has not been created yet (cold-start schema)."""

    code = "TABLE_NOT_FOUND"

    @staticmethod
    def matches(backend_code: Optional[int], message: Optional[str]) -> bool:
        if backend_code == TABLE_NOT_FOUND_CODE:
            return True
        return bool(message) and "Table not found" in message


class AuthenticationError(ConsoleError):
    """Missing, expired or rejected credentials."""

    code = "NOT_AUTHENTICATED"


class StoreNotFoundError(ConsoleError):
    """A write needs a store profile and the account has none yet."""

    code = "STORE_NOT_FOUND"

    def __init__(self, message: str = "Please create a store profile first."):
        super().__init__(message)


class StoreAccessError(ConsoleError):
    """A record does not belong to the caller's store."""

    code = "STORE_ACCESS_DENIED"


class InvalidTransitionError(ConsoleError):
    """A session state change that the console's state machine forbids."""

    code = "INVALID_STATE"
