"""Error models for the storefront SDK."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .checkout import StockAdjustment


class StorefrontError(Exception):
    """Base exception for the storefront SDK."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "STOREFRONT_ERROR"
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class APIError(StorefrontError):
    """Error from an API response."""

    def __init__(
        self,
        message: str,
        status_code: int,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code or "API_ERROR", details)
        self.status_code = status_code

    @classmethod
    def from_response(cls, status_code: int, body: Any) -> "APIError":
        """Create the matching APIError subclass from a response envelope.

        The backend answers failures with a problem-details style envelope
        (``title``, ``detail``, ``status``); older endpoints send a bare
        string or nothing at all.
        """
        error_cls = _STATUS_ERRORS.get(status_code, cls)
        if isinstance(body, str):
            return error_cls(body or "Unknown error", status_code=status_code)
        if not isinstance(body, dict):
            return error_cls("Unknown error", status_code=status_code)

        title = body.get("title")
        detail = body.get("detail")
        message = detail or title or body.get("message") or "Unknown error"
        details = {k: body[k] for k in ("title", "detail", "type", "instance") if body.get(k)}
        if isinstance(body.get("errors"), (list, dict)):
            details["errors"] = body["errors"]
        return error_cls(message, status_code=status_code, details=details)


class AuthenticationError(APIError):
    """The backend rejected the bearer credential (HTTP 401)."""

    def __init__(
        self,
        message: str = "Invalid or expired credential",
        status_code: int = 401,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, status_code, code or "AUTHENTICATION_ERROR", details)


class AuthorizationError(APIError):
    """The authenticated user may not perform the call (HTTP 403)."""

    def __init__(
        self,
        message: str = "Forbidden",
        status_code: int = 403,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, status_code, code or "AUTHORIZATION_ERROR", details)


class NotFoundError(APIError):
    """Resource not found (HTTP 404)."""

    def __init__(
        self,
        message: str = "Not found",
        status_code: int = 404,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, status_code, code or "NOT_FOUND", details)


class InvalidResponseError(APIError):
    """The backend answered, but the body does not have the expected shape."""

    def __init__(
        self,
        message: str = "Unexpected response from the shop backend",
        status_code: int = 502,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, status_code, code or "INVALID_RESPONSE", details)


_STATUS_ERRORS: dict[int, type[APIError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
}


class NetworkError(StorefrontError):
    """The request never produced a response (DNS, refused connection, timeout)."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message, code="NETWORK_ERROR")
        self.cause = cause


class ValidationError(StorefrontError):
    """Local validation failed; nothing was sent."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, code="VALIDATION_ERROR", details={"field": field})
        self.field = field


class CheckoutError(StorefrontError):
    """Base exception for checkout flow errors."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code or "CHECKOUT_ERROR", details)


class NotAuthenticatedError(CheckoutError):
    """Checkout requires a signed-in user."""

    def __init__(self, message: str = "Sign in to continue to checkout"):
        super().__init__(message, code="NOT_AUTHENTICATED")


class EmptyCartError(CheckoutError):
    """Checkout cannot start with an empty cart."""

    def __init__(self, message: str = "Your cart is empty"):
        super().__init__(message, code="EMPTY_CART")


class CheckoutStateError(CheckoutError):
    """A checkout transition was attempted before its guard was satisfied."""

    def __init__(self, message: str, state: Optional[str] = None):
        super().__init__(message, code="CHECKOUT_STATE", details={"state": state})
        self.state = state


class InventoryValidationError(CheckoutError):
    """Requested quantities exceeded authoritative stock; the cart was clamped."""

    def __init__(self, adjustments: list["StockAdjustment"]):
        lines = [adjustment.describe() for adjustment in adjustments]
        super().__init__(
            "Some items are no longer available in the requested quantity:\n" + "\n".join(lines),
            code="INSUFFICIENT_STOCK",
            details={"adjustments": lines},
        )
        self.adjustments = adjustments
