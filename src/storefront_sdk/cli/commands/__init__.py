"""CLI command modules."""
from . import admin, auth, cart, checkout, orders, products

__all__ = ["admin", "auth", "cart", "checkout", "orders", "products"]
