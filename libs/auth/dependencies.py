from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader

from libs.auth.models import SessionCredentials

user_token_header = APIKeyHeader(name="user-token", auto_error=False)
user_id_header = APIKeyHeader(name="user-id", auto_error=False)


async def get_session_credentials(
    user_token: Annotated[Optional[str], Depends(user_token_header)],
    user_id: Annotated[Optional[str], Depends(user_id_header)],
) -> SessionCredentials:
    """
    Collect the session headers.

    Backendless sessions are identified by the ``user-token`` header; the
    ``user-id`` header names the account the token was issued for, which is
    how the Backendless SDK reloads its cached current user.
    """
    return SessionCredentials(user_token=user_token, user_id=user_id)
