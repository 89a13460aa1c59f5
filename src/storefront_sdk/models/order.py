"""Order models for the storefront SDK."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import Field

from .base import StorefrontModel
from .product import Product


class OrderItem(StorefrontModel):
    """One product line of a placed order."""

    id: int
    product: Product = Field(alias="productDTO")
    quantity: int
    unit_price: Decimal = Field(alias="unitPrice")
    subtotal: Decimal


class Order(StorefrontModel):
    """A placed order as listed in the order history."""

    id: int
    order_guid: Optional[str] = Field(default=None, alias="orderGuid")
    total_amount: Decimal = Field(alias="totalAmount")
    status: str = ""
    notes: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    items: list[OrderItem] = Field(default_factory=list)


class OrderSubmission(StorefrontModel):
    """Body of ``POST /order/create`` assembled by the checkout flow."""

    user_id: Optional[Union[int, str]] = Field(default=None, alias="userId")
    delivery_method: str = Field(alias="deliveryMethod")
    selected_address: Optional[dict[str, Any]] = Field(default=None, alias="selectedAddress")
    payment_method_id: int = Field(alias="paymentMethodId")
    cart_items: list[dict[str, Any]] = Field(default_factory=list, alias="cartItems")
    total: Decimal
    notes: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        # selectedAddress is sent as an explicit null for pickup orders
        return self.model_dump(mode="json", by_alias=True)
