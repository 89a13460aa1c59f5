"""Checkout models for the storefront SDK."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Optional

from pydantic import Field

from .address import UserAddress
from .base import StorefrontModel
from .cart import CartLine

DEFAULT_SHIPPING_SURCHARGE = Decimal("5.99")


class DeliveryMethod(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class PaymentMethod(IntEnum):
    """Payment choice and the backend id it maps to. Nothing is processed locally."""

    BLIK = 1
    CREDIT_CARD = 2
    PAYPAL = 3
    APPLE_PAY = 4
    GOOGLE_PAY = 5
    CASH_ON_PICKUP = 6

    @property
    def display_name(self) -> str:
        return PAYMENT_METHOD_NAMES[self]


PAYMENT_METHOD_NAMES = {
    PaymentMethod.BLIK: "BLIK",
    PaymentMethod.CREDIT_CARD: "Credit Card",
    PaymentMethod.PAYPAL: "PayPal",
    PaymentMethod.APPLE_PAY: "Apple Pay",
    PaymentMethod.GOOGLE_PAY: "Google Pay",
    PaymentMethod.CASH_ON_PICKUP: "Cash on Pickup",
}


class CheckoutState(str, Enum):
    IDLE = "idle"
    ADDRESS_SELECTION = "address_selection"
    PAYMENT_SELECTION = "payment_selection"
    INVENTORY_VALIDATION = "inventory_validation"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    FAILED = "failed"


def compute_total(
    subtotal: Decimal,
    delivery_method: DeliveryMethod,
    shipping_surcharge: Decimal = DEFAULT_SHIPPING_SURCHARGE,
) -> Decimal:
    """Pickup pays the subtotal; delivery adds the flat surcharge."""
    if DeliveryMethod(delivery_method) is DeliveryMethod.DELIVERY:
        return subtotal + shipping_surcharge
    return subtotal


class CheckoutDraft(StorefrontModel):
    """In-progress order, stored under the transient draft key between steps.

    ``cart_lines`` is a copy of the cart taken when checkout starts, so edits
    made to the cart elsewhere do not leak into the order being assembled.
    """

    cart_lines: list[CartLine] = Field(default_factory=list, alias="cartItems")
    delivery_method: DeliveryMethod = Field(default=DeliveryMethod.DELIVERY, alias="deliveryMethod")
    selected_address: Optional[UserAddress] = Field(default=None, alias="selectedAddress")
    payment_method_id: Optional[int] = Field(default=None, alias="paymentMethodId")
    notes: Optional[str] = None
    shipping_surcharge: Decimal = Field(default=DEFAULT_SHIPPING_SURCHARGE, alias="shippingSurcharge")

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.cart_lines), Decimal("0"))

    @property
    def shipping(self) -> Decimal:
        if DeliveryMethod(self.delivery_method) is DeliveryMethod.DELIVERY:
            return self.shipping_surcharge
        return Decimal("0")

    @property
    def total(self) -> Decimal:
        return compute_total(self.subtotal, self.delivery_method, self.shipping_surcharge)

    @property
    def payment_method(self) -> Optional[PaymentMethod]:
        if self.payment_method_id is None:
            return None
        return PaymentMethod(self.payment_method_id)

    def payment_method_name(self) -> str:
        method = self.payment_method
        return method.display_name if method else ""


@dataclass(frozen=True)
class StockAdjustment:
    """A cart line clamped down to the stock the catalog reported."""

    product_id: int
    name: str
    requested: int
    available: int

    def describe(self) -> str:
        if self.available == 0:
            return f"{self.name}: out of stock (requested {self.requested}), removed from cart"
        return f"{self.name}: only {self.available} available (requested {self.requested})"
