"""Order figures shown on the dashboard."""

from typing import Any, Iterable, Mapping

from services.merchant_service.models import OrderStatus


def summarize_orders(orders: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Sales total (cancelled orders excluded), counts and per-status tally."""
    total_sales = 0.0
    order_count = 0
    customers = set()
    by_status = {status.value: 0 for status in OrderStatus}

    for order in orders:
        order_count += 1
        status = order.get("status") or OrderStatus.PENDING.value
        by_status[status] = by_status.get(status, 0) + 1
        if status != OrderStatus.CANCELLED.value:
            total_sales += float(order.get("totalAmount") or 0)
        customer = (order.get("customerEmail") or order.get("customerName") or "").lower()
        if customer:
            customers.add(customer)

    return {
        "total_sales": round(total_sales, 2),
        "order_count": order_count,
        "customer_count": len(customers),
        "by_status": by_status,
    }
