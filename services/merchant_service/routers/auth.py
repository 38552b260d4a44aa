"""Account routes: register, login, logout and the signed-in account."""

from fastapi import APIRouter, Depends, Request, status
from libs.auth.models import Account, AuthSession
from libs.baas.identity import IdentityProvider
from libs.common.logging import get_logger
from libs.common.rate_limit import auth_limit
from services.merchant_service.dependencies import get_current_account, get_identity
from services.merchant_service.schemas import (
    AccountUpdate,
    LoginRequest,
    RegisterRequest,
    RestorePasswordRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=AuthSession, status_code=status.HTTP_201_CREATED
)
@auth_limit
async def register(
    request: Request,
    payload: RegisterRequest,
    identity: IdentityProvider = Depends(get_identity),
):
    """Create an account and sign it in."""
    await identity.register(payload.email, payload.password, payload.name)
    return await identity.login(payload.email, payload.password)


@router.post("/login", response_model=AuthSession)
@auth_limit
async def login(
    request: Request,
    payload: LoginRequest,
    identity: IdentityProvider = Depends(get_identity),
):
    """Sign in. Send the returned token back as the ``user-token`` header."""
    return await identity.login(payload.email, payload.password)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(identity: IdentityProvider = Depends(get_identity)):
    await identity.logout()


@router.get("/me", response_model=Account)
async def get_me(account: Account = Depends(get_current_account)):
    return account


@router.patch("/me", response_model=Account)
async def update_me(
    payload: AccountUpdate,
    account: Account = Depends(get_current_account),
    identity: IdentityProvider = Depends(get_identity),
):
    """Update name, contact details or password of the signed-in account."""
    fields = payload.model_dump(by_alias=True, exclude_unset=True, mode="json")
    if not fields:
        return account
    logger.info(f"Updating account {account.id} fields {sorted(k for k in fields if k != 'password')}")
    return await identity.update_account(fields)


@router.post("/restore-password", status_code=status.HTTP_202_ACCEPTED)
@auth_limit
async def restore_password(
    request: Request,
    payload: RestorePasswordRequest,
    identity: IdentityProvider = Depends(get_identity),
):
    """Send a password reset email."""
    await identity.restore_password(payload.email)
    return {"status": "sent"}
