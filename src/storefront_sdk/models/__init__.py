"""Storefront SDK models."""
from .base import StorefrontModel
from .envelope import ApiResponse
from .product import Category, Product, ProductInput
from .address import AddressForm, UserAddress
from .order import Order, OrderItem, OrderSubmission
from .user import RegistrationForm, User, UserUpdate, password_strength
from .session import Identity, Role, SessionClaims
from .cart import CartLine, CartSnapshot
from .checkout import (
    DEFAULT_SHIPPING_SURCHARGE,
    CheckoutDraft,
    CheckoutState,
    DeliveryMethod,
    PaymentMethod,
    StockAdjustment,
    compute_total,
)
from .errors import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    CheckoutError,
    CheckoutStateError,
    EmptyCartError,
    InvalidResponseError,
    InventoryValidationError,
    NetworkError,
    NotAuthenticatedError,
    NotFoundError,
    StorefrontError,
    ValidationError,
)

__all__ = [
    "StorefrontModel",
    "ApiResponse",
    "Category",
    "Product",
    "ProductInput",
    "AddressForm",
    "UserAddress",
    "Order",
    "OrderItem",
    "OrderSubmission",
    "RegistrationForm",
    "User",
    "UserUpdate",
    "password_strength",
    "Identity",
    "Role",
    "SessionClaims",
    "CartLine",
    "CartSnapshot",
    "DEFAULT_SHIPPING_SURCHARGE",
    "CheckoutDraft",
    "CheckoutState",
    "DeliveryMethod",
    "PaymentMethod",
    "StockAdjustment",
    "compute_total",
    "APIError",
    "AuthenticationError",
    "AuthorizationError",
    "CheckoutError",
    "CheckoutStateError",
    "EmptyCartError",
    "InvalidResponseError",
    "InventoryValidationError",
    "NetworkError",
    "NotAuthenticatedError",
    "NotFoundError",
    "StorefrontError",
    "ValidationError",
]
