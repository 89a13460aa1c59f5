"""
Tests for error models
"""
from storefront_sdk.models.checkout import StockAdjustment
from storefront_sdk.models.errors import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    CheckoutError,
    EmptyCartError,
    InvalidResponseError,
    InventoryValidationError,
    NetworkError,
    NotFoundError,
    StorefrontError,
    ValidationError,
)


class TestStorefrontError:
    def test_string_includes_code(self):
        error = StorefrontError("Something broke", code="BROKEN")
        assert str(error) == "[BROKEN] Something broke"

    def test_default_code(self):
        assert StorefrontError("x").code == "STOREFRONT_ERROR"

    def test_to_dict(self):
        error = StorefrontError("Something broke", code="BROKEN", details={"a": 1})
        assert error.to_dict() == {
            "error": {"code": "BROKEN", "message": "Something broke", "details": {"a": 1}}
        }


class TestAPIErrorFromResponse:
    def test_problem_details_envelope(self):
        """Should prefer detail over title and keep both in details."""
        error = APIError.from_response(
            422,
            {"success": False, "title": "Unprocessable", "detail": "Quantity too high", "status": 422},
        )
        assert type(error) is APIError
        assert error.status_code == 422
        assert error.message == "Quantity too high"
        assert error.details == {"title": "Unprocessable", "detail": "Quantity too high"}

    def test_title_when_no_detail(self):
        error = APIError.from_response(500, {"title": "Server exploded"})
        assert error.message == "Server exploded"

    def test_maps_status_to_subclass(self):
        assert isinstance(APIError.from_response(401, {"title": "Invalid token"}), AuthenticationError)
        assert isinstance(APIError.from_response(403, {"title": "Forbidden"}), AuthorizationError)
        assert isinstance(APIError.from_response(404, {}), NotFoundError)

    def test_bare_string_body(self):
        error = APIError.from_response(502, "Bad gateway")
        assert error.message == "Bad gateway"
        assert error.status_code == 502

    def test_unknown_body(self):
        assert APIError.from_response(500, None).message == "Unknown error"
        assert APIError.from_response(500, "").message == "Unknown error"

    def test_validation_errors_are_kept(self):
        error = APIError.from_response(400, {"title": "Bad request", "errors": {"email": ["required"]}})
        assert error.details["errors"] == {"email": ["required"]}


class TestLocalErrors:
    def test_network_error_keeps_cause(self):
        cause = OSError("refused")
        error = NetworkError("Could not reach", cause=cause)
        assert error.code == "NETWORK_ERROR"
        assert error.cause is cause

    def test_validation_error_field(self):
        error = ValidationError("Street is required", field="street")
        assert error.field == "street"
        assert error.details == {"field": "street"}

    def test_invalid_response_defaults(self):
        error = InvalidResponseError()
        assert isinstance(error, APIError)
        assert error.status_code == 502
        assert error.code == "INVALID_RESPONSE"

    def test_checkout_errors_share_base(self):
        assert isinstance(EmptyCartError(), CheckoutError)
        assert EmptyCartError().code == "EMPTY_CART"


class TestInventoryValidationError:
    def test_message_lists_every_adjustment(self):
        adjustments = [
            StockAdjustment(product_id=1, name="Desk Lamp", requested=3, available=1),
            StockAdjustment(product_id=2, name="Chair", requested=2, available=0),
        ]
        error = InventoryValidationError(adjustments)

        assert error.code == "INSUFFICIENT_STOCK"
        assert "Desk Lamp: only 1 available (requested 3)" in error.message
        assert "Chair: out of stock (requested 2), removed from cart" in error.message
        assert error.adjustments == adjustments
        assert len(error.details["adjustments"]) == 2
