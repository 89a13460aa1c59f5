"""
Storefront Python SDK

Async client-side core for the shop: session, cart, checkout and the HTTP
fault interceptor, on top of the backend's REST API.
"""

from .app import Storefront
from .cart import CartStore
from .checkout import CheckoutOrchestrator
from .client import StorefrontClient
from .config import StorefrontSettings, get_settings
from .interceptor import FaultInterceptor
from .modals import ModalHandle, ModalHost, ModalKind
from .search import SuggestionSearch
from .session import SessionManager
from .storage import CART_KEY, CHECKOUT_DRAFT_KEY, TOKEN_KEY, FileStore, KeyValueStore, MemoryStore
from .ui import LoggingNavigator, LoggingNotifier, Navigator, Notifier, Route
from .models.errors import (
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
from .models.address import AddressForm, UserAddress
from .models.cart import CartLine, CartSnapshot
from .models.checkout import CheckoutDraft, CheckoutState, DeliveryMethod, PaymentMethod, StockAdjustment
from .models.order import Order, OrderItem, OrderSubmission
from .models.product import Category, Product, ProductInput
from .models.session import Identity, Role, SessionClaims
from .models.user import RegistrationForm, User, UserUpdate

__version__ = "0.1.0"

__all__ = [
    # Wiring and client
    "Storefront",
    "StorefrontClient",
    "StorefrontSettings",
    "get_settings",
    # Core components
    "SessionManager",
    "CartStore",
    "CheckoutOrchestrator",
    "FaultInterceptor",
    "ModalHost",
    "ModalHandle",
    "ModalKind",
    "SuggestionSearch",
    # Storage
    "KeyValueStore",
    "FileStore",
    "MemoryStore",
    "TOKEN_KEY",
    "CART_KEY",
    "CHECKOUT_DRAFT_KEY",
    # UI seams
    "Navigator",
    "Notifier",
    "LoggingNavigator",
    "LoggingNotifier",
    "Route",
    # Errors
    "StorefrontError",
    "APIError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "NetworkError",
    "ValidationError",
    "CheckoutError",
    "CheckoutStateError",
    "EmptyCartError",
    "InvalidResponseError",
    "InventoryValidationError",
    "NotAuthenticatedError",
    # Models
    "AddressForm",
    "UserAddress",
    "CartLine",
    "CartSnapshot",
    "CheckoutDraft",
    "CheckoutState",
    "DeliveryMethod",
    "PaymentMethod",
    "StockAdjustment",
    "Order",
    "OrderItem",
    "OrderSubmission",
    "Category",
    "Product",
    "ProductInput",
    "Identity",
    "Role",
    "SessionClaims",
    "RegistrationForm",
    "User",
    "UserUpdate",
]
