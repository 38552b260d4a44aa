"""Pydantic schemas for the merchant service.

Wire format is camelCase (``storeName``, ``merchantId``) to match the
Backendless tables; Python attributes are snake_case.
"""

from datetime import datetime
from typing import Any, Optional

from libs.auth.models import Account
from libs.common.datetime_utils import utc_now
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel
from services.merchant_service.models import AuthState, OrderStatus

TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ConsoleModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredRecord(ConsoleModel):
    """Fields every persisted record carries once normalised."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    object_id: Optional[str] = None
    merchant_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def drop_null_columns(cls, data: Any) -> Any:
        # Backendless returns null for columns a record never set.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# ============================================================================
# STORE PROFILE SCHEMAS
# ============================================================================


class StoreProfileBase(ConsoleModel):
    store_name: str = Field(..., min_length=1, max_length=120)
    address: str = ""
    contact_number: str = ""
    store_type: str = ""
    # Longer descriptions are accepted and truncated when saved.
    description: str = ""
    logo_url: Optional[str] = None
    store_open: bool = True
    auto_schedule: bool = False
    opening_time: str = Field("09:00", pattern=TIME_OF_DAY_PATTERN)
    closing_time: str = Field("18:00", pattern=TIME_OF_DAY_PATTERN)


class StoreProfileCreate(StoreProfileBase):
    pass


class StoreProfileUpdate(ConsoleModel):
    store_name: Optional[str] = Field(None, min_length=1, max_length=120)
    address: Optional[str] = None
    contact_number: Optional[str] = None
    store_type: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    store_open: Optional[bool] = None
    auto_schedule: Optional[bool] = None
    opening_time: Optional[str] = Field(None, pattern=TIME_OF_DAY_PATTERN)
    closing_time: Optional[str] = Field(None, pattern=TIME_OF_DAY_PATTERN)


class StoreProfileResponse(StoredRecord, StoreProfileBase):
    store_name: str = ""
    opening_time: str = "09:00"
    closing_time: str = "18:00"


class StoreStatusUpdate(ConsoleModel):
    store_open: bool


class ScheduleResult(ConsoleModel):
    profile: StoreProfileResponse
    changed: bool


# ============================================================================
# CATEGORY SCHEMAS
# ============================================================================


class CategoryCreate(ConsoleModel):
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    product_count: int = Field(0, ge=0)


class CategoryResponse(StoredRecord):
    name: str
    description: Optional[str] = None
    product_count: int = 0


class CategoryDeleteResult(ConsoleModel):
    deleted: bool = True
    orphaned_products: int = 0


class CategorySuggestions(ConsoleModel):
    suggestions: list[str]


class CategorySuggestionRequest(ConsoleModel):
    store_type: Optional[str] = None


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class ProductCreate(ConsoleModel):
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    image_url: Optional[str] = None
    category_id: str
    is_available: Optional[bool] = None


class ProductResponse(StoredRecord):
    name: str
    description: str = ""
    price: float = 0
    image_url: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    is_available: bool = True


class ProductDescriptionRequest(ConsoleModel):
    product_name: str = Field(..., min_length=1)
    category_name: str = ""


class ProductDescriptionResponse(ConsoleModel):
    description: str


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItem(ConsoleModel):
    product_id: str
    product_name: str
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


class OrderCreate(ConsoleModel):
    id: Optional[str] = None
    customer_name: str = Field(..., min_length=1)
    customer_email: EmailStr
    items: list[OrderItem] = Field(..., min_length=1)
    total_amount: Optional[float] = Field(None, ge=0)
    status: OrderStatus = OrderStatus.PENDING
    date: datetime = Field(default_factory=utc_now)


class OrderResponse(StoredRecord):
    customer_name: str
    customer_email: str
    items: list[OrderItem] = []
    total_amount: float = 0
    status: OrderStatus = OrderStatus.PENDING
    date: Optional[datetime] = None


class OrderStatusUpdate(ConsoleModel):
    status: OrderStatus


class OrderSummary(ConsoleModel):
    total_sales: float
    order_count: int
    customer_count: int
    by_status: dict[str, int]


# ============================================================================
# AUTH / SESSION SCHEMAS
# ============================================================================


class RegisterRequest(ConsoleModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)


class LoginRequest(ConsoleModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AccountUpdate(ConsoleModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    contact_number: Optional[str] = None
    avatar_url: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)


class RestorePasswordRequest(ConsoleModel):
    email: EmailStr


class SessionResponse(ConsoleModel):
    auth_state: AuthState
    account: Optional[Account] = None
    profile: Optional[StoreProfileResponse] = None


class ConsoleDataResponse(ConsoleModel):
    categories: list[CategoryResponse]
    products: list[ProductResponse]
    orders: list[OrderResponse]


class InsightsResponse(ConsoleModel):
    insights: str
