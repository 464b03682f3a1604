# cafe/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, model_validator
from typing import Any, List, Literal
from decimal import Decimal
from datetime import datetime


class CartItemIn(BaseModel):
    """Schema for adding a menu item to the cart."""

    menu_item_id: str = Field(..., min_length=1, description="Menu item id")
    quantity: int = Field(..., gt=0, description="Quantity (must be > 0)")
    special_instructions: str | None = None
    selected_size: str | None = None
    selected_milk: str | None = None
    add_cold_foam: bool = False


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., gt=0)


class CartItemOut(BaseModel):
    """Schema for a cart line (response)."""

    item_id: int
    menu_item_id: str
    name: str
    quantity: int
    unit_price: Decimal
    special_instructions: str | None = None
    selected_size: str | None = None
    selected_milk: str | None = None
    add_cold_foam: bool = False


class CartOut(BaseModel):
    """Schema for the server cart (response)."""

    cart_id: str
    user_id: int | None = None
    guest_id: str | None = None
    items: List[CartItemOut]
    total_amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartSyncIn(BaseModel):
    """
    Local cart snapshot posted by the storefront.
    Lines stay raw JSON values: malformed lines are dropped by the validator, not rejected with 422.
    """

    items: List[Any] = Field(default_factory=list)


class ItemOutcomeOut(BaseModel):
    product_ref: str
    display_name: str
    succeeded: bool
    error: str | None = None


class SyncOutcomeOut(BaseModel):
    """Result of replaying a local snapshot against the server cart."""

    overall_success: bool
    attempted_count: int
    succeeded_count: int
    discarded_count: int
    failure: str | None = None
    clear_local_cart: bool = False
    outcomes: List[ItemOutcomeOut]


class DeliveryAddress(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)


class GuestInfo(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)


class OrderDetails(BaseModel):
    """Fulfilment and payment details of an order, independent of its items."""

    order_type: Literal["delivery", "pickup"]
    payment_method: Literal["cash", "card", "receipt_upload"]
    delivery_address: DeliveryAddress | None = None
    pickup_time: datetime | None = None
    guest_info: GuestInfo | None = None

    @model_validator(mode="after")
    def check_fulfilment(self):
        if self.order_type == "delivery" and self.delivery_address is None:
            raise ValueError("Delivery address is required for delivery orders")
        if self.order_type == "pickup" and self.pickup_time is None:
            raise ValueError("Pickup time is required for pickup orders")
        return self


class CheckoutIn(OrderDetails):
    """Schema for placing an order from the local cart snapshot."""

    items: List[Any] = Field(default_factory=list)


class OrderItemOut(BaseModel):
    menu_item_id: str
    name: str
    quantity: int
    price: Decimal
    special_instructions: str | None = None
    selected_size: str | None = None
    selected_milk: str | None = None
    add_cold_foam: bool = False

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema for an order (response)."""

    id: str
    user_id: int | None = None
    guest_id: str | None = None
    is_guest_order: bool
    status: str
    order_type: str
    payment_method: str
    payment_status: str
    items: List[OrderItemOut]
    subtotal: Decimal
    tax: Decimal
    total_amount: Decimal
    pickup_time: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderTrackOut(BaseModel):
    """Public order status view. Guest contact details only appear on guest orders."""

    id: str
    status: str
    order_type: str
    payment_method: str
    payment_status: str
    items: List[OrderItemOut]
    tax: Decimal
    total_amount: Decimal
    pickup_time: datetime | None = None
    delivery_address: DeliveryAddress | None = None
    is_guest_order: bool
    guest_info: GuestInfo | None = None
    created_at: datetime


class OrderStatusUpdate(BaseModel):
    status: Literal["pending", "confirmed", "preparing", "ready", "delivered", "cancelled"]


class PaymentStatusUpdate(BaseModel):
    payment_status: Literal["pending", "paid", "failed"]


class UserCreate(BaseModel):
    """Schema for creating a user."""

    id: int = Field(..., gt=0, description="User id (must be > 0)")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class UserRead(BaseModel):
    """Schema for a user (response)."""

    id: int
    first_name: str
    last_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ConnectionIn(BaseModel):
    user_id: int = Field(..., gt=0)
    connection_id: str = Field(..., min_length=1)
