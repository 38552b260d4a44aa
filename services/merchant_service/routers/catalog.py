"""Catalog routes: categories and products of the merchant's store."""

from fastapi import APIRouter, Depends, Request, status
from libs.auth.models import Account
from libs.common.rate_limit import ai_limit
from services.merchant_service import ai
from services.merchant_service.dependencies import get_console, get_current_account
from services.merchant_service.schemas import (
    CategoryCreate,
    CategoryDeleteResult,
    CategoryResponse,
    CategorySuggestionRequest,
    CategorySuggestions,
    ProductCreate,
    ProductDescriptionRequest,
    ProductDescriptionResponse,
    ProductResponse,
)
from services.merchant_service.services.catalog import delete_category, label_products
from services.merchant_service.services.console import Console

router = APIRouter(tags=["catalog"])


# ============================================================================
# CATEGORIES
# ============================================================================


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    return list(await console.categories.list(account.id))


@router.post(
    "/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED
)
async def save_category(
    payload: CategoryCreate,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Create a category, or update it when ``id`` is set."""
    return await console.categories.save(payload, account.id)


@router.delete("/categories/{category_id}", response_model=CategoryDeleteResult)
async def remove_category(
    category_id: str,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """
    Delete a category.

    Its products are kept and show up as "Uncategorized"; the response says
    how many were affected.
    """
    orphaned = await delete_category(
        console.categories, console.products, category_id, account.id
    )
    return CategoryDeleteResult(orphaned_products=orphaned)


@router.post("/categories/suggestions", response_model=CategorySuggestions)
@ai_limit
async def suggest_categories(
    request: Request,
    payload: CategorySuggestionRequest,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Category ideas for the store type (the profile's, unless given)."""
    store_type = payload.store_type
    if not store_type:
        profile = await console.profiles.get_profile(account.id)
        store_type = (profile or {}).get("storeType") or "General Store"
    return CategorySuggestions(suggestions=await ai.suggest_categories(store_type))


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=list[ProductResponse])
async def list_products(
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Products with their category name resolved."""
    products = await console.products.list(account.id)
    categories = await console.categories.list(account.id)
    return label_products(products, categories)


@router.post(
    "/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED
)
async def save_product(
    payload: ProductCreate,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    """Create a product, or update it when ``id`` is set."""
    product = await console.products.save(payload, account.id)
    categories = await console.categories.list(account.id)
    return label_products([product], categories)[0]


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_product(
    product_id: str,
    account: Account = Depends(get_current_account),
    console: Console = Depends(get_console),
):
    await console.products.delete({"objectId": product_id}, account.id)


@router.post("/products/description", response_model=ProductDescriptionResponse)
@ai_limit
async def describe_product(
    request: Request,
    payload: ProductDescriptionRequest,
    account: Account = Depends(get_current_account),
):
    """Draft a product description. Empty when generation fails."""
    description = await ai.generate_product_description(
        payload.product_name, payload.category_name
    )
    return ProductDescriptionResponse(description=description)
