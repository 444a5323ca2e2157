"""Pydantic request/response schemas for the storefront API.

These are the external contracts. They are kept separate from the Protean
commands and aggregates they are translated to.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

OrderStatusValue = Literal["PENDING", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED", "FAILED"]
PaymentMethodValue = Literal["COD", "BANK_TRANSFER", "CREDIT_CARD", "MOMO", "VNPAY"]
PaymentStatusValue = Literal["PENDING", "PAID", "FAILED", "REFUNDED"]
AddressTypeValue = Literal["SHIPPING", "BILLING", "OTHER"]


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = Field(default=None, max_length=15)
    role: Literal["CUSTOMER", "ADMIN"] | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "jane",
                    "email": "jane@example.com",
                    "first_name": "Jane",
                    "last_name": "Doe",
                }
            ]
        }
    }


class UserIdResponse(BaseModel):
    user_id: str


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    role: str
    status: str


class UpdateUserRequest(BaseModel):
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=15)


class UserPage(BaseModel):
    items: list[UserResponse]
    page: int
    size: int
    total: int


class AddressRequest(BaseModel):
    apartment_number: str | None = None
    floor: str | None = None
    building: str | None = None
    street_number: str | None = None
    street: str | None = None
    ward: str | None = None
    district: str | None = None
    city: str
    country: str
    address_type: AddressTypeValue | None = None


class AddressResponse(AddressRequest):
    id: str
    user_id: str


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class CategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    parent_category_id: str | None = None


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    parent_category_id: str | None = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    parent_category_id: str | None = None


class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    sku: str = Field(min_length=1, max_length=100)
    price: float = Field(gt=0)
    stock_quantity: int = Field(default=0, ge=0)
    description: str | None = None
    category_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ceramic Mug",
                    "sku": "MUG-001",
                    "price": 12.5,
                    "stock_quantity": 40,
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    category_id: str | None = None


class AdjustStockRequest(BaseModel):
    delta: int
    reason: str = Field(min_length=1, max_length=255)


class ProductImageRequest(BaseModel):
    url: str = Field(min_length=1, max_length=500)
    display_order: int | None = Field(default=None, ge=0)


class ProductImageResponse(BaseModel):
    id: str
    url: str
    display_order: int


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    sku: str
    stock_quantity: int
    category_id: str | None = None
    images: list[ProductImageResponse] = []


class ProductPage(BaseModel):
    items: list[ProductResponse]
    page: int
    size: int
    total: int


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


class EditReviewRequest(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = None


class ReviewResponse(BaseModel):
    id: str
    user_id: str
    product_id: str
    rating: int
    comment: str | None = None
    created_at: datetime | None = None


class ReviewPage(BaseModel):
    items: list[ReviewResponse]
    page: int
    size: int
    total: int


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)


class UpdateCartLineRequest(BaseModel):
    quantity: int


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    product_name: str | None = None
    unit_price: float
    quantity: int
    subtotal: float


class CartResponse(BaseModel):
    id: str
    user_id: str
    lines: list[CartLineResponse]
    total_amount: float
    total_items: int


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    shipping_address_id: str
    billing_address_id: str | None = None
    payment_method: PaymentMethodValue = "COD"
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address_id": "addr-001",
                    "payment_method": "COD",
                    "notes": "Leave at the door",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatusValue


class UpdatePaymentStatusRequest(BaseModel):
    payment_status: PaymentStatusValue


class AddressSnapshotSchema(BaseModel):
    apartment_number: str | None = None
    floor: str | None = None
    building: str | None = None
    street_number: str | None = None
    street: str | None = None
    ward: str | None = None
    district: str | None = None
    city: str
    country: str


class OrderLineResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    sku: str | None = None
    quantity: int
    unit_price: float
    subtotal: float


class OrderResponse(BaseModel):
    id: str
    order_code: str
    user_id: str
    status: str
    payment_method: str
    payment_status: str
    notes: str | None = None
    total_amount: float
    shipping_address_id: str
    shipping_address: AddressSnapshotSchema | None = None
    billing_address_id: str
    billing_address: AddressSnapshotSchema | None = None
    lines: list[OrderLineResponse]
    placed_at: datetime | None = None
    updated_at: datetime | None = None


class OrderPage(BaseModel):
    items: list[OrderResponse]
    page: int
    size: int
    total: int


class StatusResponse(BaseModel):
    status: str = "ok"
