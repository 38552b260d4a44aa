from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_DISPLAY_NAME = "Merchant"


class Account(BaseModel):
    """
    A merchant account as returned by the identity provider.

    Read-only from the console's point of view; ``name`` is derived from the
    ``name`` field or from first/last name parts.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email: Optional[str] = None
    name: str = DEFAULT_DISPLAY_NAME
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    contact_number: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_backend(cls, data: dict[str, Any]) -> "Account":
        first_name = data.get("firstName")
        last_name = data.get("lastName")
        name = data.get("name") or f"{first_name or ''} {last_name or ''}".strip()
        return cls(
            id=data.get("objectId") or data["id"],
            email=data.get("email"),
            name=name or DEFAULT_DISPLAY_NAME,
            first_name=first_name,
            last_name=last_name,
            contact_number=data.get("contactNumber"),
            avatar_url=data.get("avatarUrl"),
        )


class AuthSession(BaseModel):
    """Result of a successful login: the account and its session token."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    account: Account
    user_token: str = Field(..., description="Send back as the user-token header")


class SessionCredentials(BaseModel):
    """Credentials the console frontend sends with each request."""

    user_token: Optional[str] = None
    user_id: Optional[str] = None
