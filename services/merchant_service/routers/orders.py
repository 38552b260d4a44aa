"""Order routes for the merchant's store."""

from fastapi import APIRouter, Depends, status
from libs.auth.models import Account
from services.merchant_service.dependencies import get_console, get_current_account
from services.merchant_service.schemas import (
    OrderCreate,
    OrderResponse,
    OrderStatusUpdate,
    OrderSummary,
)
from services.merchant_service.services.console import Console
from services.merchant_service.services.dashboard import summarize_orders

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    return list(await console.orders.list(account.id))


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Record an order. The total is computed from the items when omitted."""
    return await console.orders.save(payload, account.id)


@router.get("/summary", response_model=OrderSummary)
async def get_order_summary(
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Dashboard figures: sales, order and customer counts."""
    return summarize_orders(await console.orders.list(account.id))


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    return await console.orders.update_status(order_id, payload.status, account.id)
