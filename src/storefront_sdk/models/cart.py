"""Cart models for the storefront SDK."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import Field

from .base import StorefrontModel


class CartLine(StorefrontModel):
    """One product's entry in the cart.

    Persisted with the wire names ``id, name, price, quantity, base64Image,
    stock`` so carts saved by older clients still restore.
    """

    product_id: int = Field(alias="id")
    display_name: str = Field(alias="name")
    unit_price: Decimal = Field(alias="price", ge=0)
    quantity: int = Field(ge=1)
    image_ref: Optional[str] = Field(default=None, alias="base64Image")
    stock_at_add: int = Field(alias="stock", ge=0)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class CartSnapshot(StorefrontModel):
    """Derived cart state published to subscribers after every mutation."""

    lines: tuple[CartLine, ...] = ()
    count: int = 0
    subtotal: Decimal = Decimal("0")

    @classmethod
    def of(cls, lines: list[CartLine]) -> "CartSnapshot":
        copies = tuple(line.model_copy() for line in lines)
        return cls(
            lines=copies,
            count=sum(line.quantity for line in copies),
            subtotal=sum((line.line_total for line in copies), Decimal("0")),
        )

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def line(self, product_id: int) -> Optional[CartLine]:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None
