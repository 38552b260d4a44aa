"""Category/product relationships.

References from products to categories are not enforced by the backend.
Deleting a category leaves its products in place; they are shown as
"Uncategorized" until reassigned.
"""

from typing import Any, Iterable, Mapping

from libs.baas.store import Record
from libs.common.logging import get_logger
from services.merchant_service.services.collections import (
    CategoryCollection,
    ProductCollection,
)

logger = get_logger(__name__)

UNCATEGORIZED = "Uncategorized"


def category_label(
    product: Mapping[str, Any], categories_by_id: Mapping[str, Mapping[str, Any]]
) -> str:
    """Display name of a product's category, tolerating dangling references."""
    category = categories_by_id.get(product.get("categoryId") or "")
    if category is None:
        return UNCATEGORIZED
    return category.get("name") or UNCATEGORIZED


def label_products(
    products: Iterable[Record], categories: Iterable[Mapping[str, Any]]
) -> list[Record]:
    """Attach ``categoryName`` to each product."""
    categories_by_id = {category["id"]: category for category in categories}
    return [
        {**product, "categoryName": category_label(product, categories_by_id)}
        for product in products
    ]


def count_products_by_category(products: Iterable[Mapping[str, Any]]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for product in products:
        category_id = product.get("categoryId")
        if category_id:
            counts[category_id] = counts.get(category_id, 0) + 1
    return counts


async def delete_category(
    categories: CategoryCollection,
    products: ProductCollection,
    category_id: str,
    account_id: str,
) -> int:
    """
    Delete a category of the account's store.

    Returns how many products still reference it afterwards.
    """
    orphaned = count_products_by_category(await products.list(account_id)).get(
        category_id, 0
    )
    await categories.delete({"objectId": category_id}, account_id)
    if orphaned:
        logger.warning(
            f"Category {category_id} deleted with {orphaned} product(s) still assigned"
        )
    return orphaned
