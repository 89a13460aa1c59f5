"""
Shopping cart store.

The only state written from several places at once (mini-cart, cart page,
checkout), so all writes go through the operations below. Each one
recomputes the snapshot, publishes it to every subscriber in order and
persists the line list, overwriting the previous value.
"""
from __future__ import annotations

import json
import logging
from collections import deque
from typing import Any, Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .models.cart import CartLine, CartSnapshot
from .storage import CART_KEY, KeyValueStore

logger = logging.getLogger(__name__)

CartListener = Callable[[CartSnapshot], None]


def _field(product: Any, name: str, default: Any = None) -> Any:
    if isinstance(product, dict):
        return product.get(name, default)
    return getattr(product, name, default)


class CartStore:
    """Cart lines keyed by product id, in insertion order."""

    def __init__(self, storage: KeyValueStore):
        self.storage = storage
        self._lines: List[CartLine] = []
        self._listeners: List[CartListener] = []
        self._snapshot = CartSnapshot()
        self._pending: deque[CartSnapshot] = deque()
        self._publishing = False
        self._restore()

    # ---- reading -------------------------------------------------------

    def snapshot(self) -> CartSnapshot:
        return self._snapshot

    @property
    def count(self) -> int:
        return self._snapshot.count

    @property
    def subtotal(self):
        return self._snapshot.subtotal

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener; it receives the current snapshot immediately.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)
        listener(self._snapshot)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- mutations -----------------------------------------------------

    def add_item(self, product: Any) -> None:
        """Add one unit of a product.

        ``product`` is a ``Product`` or any object/dict with ``id, name,
        price, stock`` and optionally ``base64_image``. An existing line
        grows by one unless that would pass its stock ceiling, in which case
        nothing changes.
        """
        product_id = _field(product, "id")
        line = self._find(product_id)
        if line is not None:
            if line.quantity + 1 <= line.stock_at_add:
                line.quantity += 1
            else:
                logger.debug(f"Product {product_id} already at stock ceiling {line.stock_at_add}")
        else:
            stock = int(_field(product, "stock", 0) or 0)
            if stock < 1:
                logger.debug(f"Product {product_id} is out of stock, not added")
                return
            self._lines.append(
                CartLine(
                    product_id=product_id,
                    display_name=_field(product, "name", ""),
                    unit_price=_field(product, "price"),
                    quantity=1,
                    image_ref=_field(product, "base64_image") or _field(product, "base64Image"),
                    stock_at_add=stock,
                )
            )
        self._commit()

    def remove_item(self, product_id: int) -> None:
        self._lines = [line for line in self._lines if line.product_id != product_id]
        self._commit()

    def set_quantity(self, product_id: int, quantity: int) -> None:
        """Set a line's quantity exactly.

        Zero or less removes the line; more than the stock ceiling is
        rejected and the line stays as it was.
        """
        line = self._find(product_id)
        if line is None:
            return
        if quantity <= 0:
            self.remove_item(product_id)
            return
        if quantity > line.stock_at_add:
            logger.debug(f"Rejected quantity {quantity} for product {product_id}, ceiling {line.stock_at_add}")
            return
        line.quantity = quantity
        self._commit()

    def reconcile_stock(self, product_id: int, available: int) -> Optional[int]:
        """Adopt authoritative stock for a line.

        The stock ceiling becomes ``available`` and the quantity is clamped
        down to it; a line with nothing left is removed.

        Returns:
            The quantity held before clamping when a clamp happened, else None
        """
        line = self._find(product_id)
        if line is None:
            return None
        available = max(0, available)
        previous = line.quantity
        if available == 0:
            self.remove_item(product_id)
            return previous
        line.stock_at_add = available
        clamped = previous > available
        if clamped:
            line.quantity = available
        self._commit()
        return previous if clamped else None

    def clear(self) -> None:
        self._lines = []
        self._commit()

    # ---- internals -----------------------------------------------------

    def _find(self, product_id: int) -> Optional[CartLine]:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def _commit(self) -> None:
        self._snapshot = CartSnapshot.of(self._lines)
        self._persist()
        self._pending.append(self._snapshot)
        if self._publishing:
            # a listener changed the cart; its snapshot goes out after this round
            return
        self._publishing = True
        try:
            while self._pending:
                snapshot = self._pending.popleft()
                for listener in list(self._listeners):
                    listener(snapshot)
        finally:
            self._publishing = False
            self._pending.clear()

    def _persist(self) -> None:
        payload = [line.to_dict() for line in self._lines]
        self.storage.set(CART_KEY, json.dumps(payload))

    def _restore(self) -> None:
        raw = self.storage.get(CART_KEY)
        if not raw:
            return
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("cart payload is not a list")
            lines = [CartLine.model_validate(item) for item in items]
        except (ValueError, TypeError, PydanticValidationError) as e:
            logger.warning(f"Discarding unreadable saved cart: {e.__class__.__name__}")
            return
        merged: List[CartLine] = []
        for line in lines:
            if line.quantity > line.stock_at_add:
                line.quantity = line.stock_at_add
            if line.quantity < 1 or any(m.product_id == line.product_id for m in merged):
                continue
            merged.append(line)
        self._lines = merged
        self._snapshot = CartSnapshot.of(self._lines)
