"""
Resources for the storefront SDK.
"""
from .base import AsyncBaseResource
from .auth import AuthResource
from .products import ProductsResource
from .categories import CategoriesResource
from .addresses import AddressesResource
from .orders import OrdersResource
from .users import UsersResource

__all__ = [
    "AsyncBaseResource",
    "AuthResource",
    "ProductsResource",
    "CategoriesResource",
    "AddressesResource",
    "OrdersResource",
    "UsersResource",
]
