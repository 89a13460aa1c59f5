"""
Tests for the checkout orchestrator
"""
import asyncio
import json
from decimal import Decimal

import httpx
import pytest

from conftest import address_json, envelope, product_json, request_json
from storefront_sdk import (
    CHECKOUT_DRAFT_KEY,
    AddressForm,
    CheckoutState,
    DeliveryMethod,
    PaymentMethod,
    Route,
)
from storefront_sdk.models.checkout import CheckoutDraft, compute_total
from storefront_sdk.models.errors import (
    APIError,
    CheckoutStateError,
    EmptyCartError,
    InvalidResponseError,
    InventoryValidationError,
    NetworkError,
    NotAuthenticatedError,
    ValidationError,
)
from storefront_sdk.models.product import Product


def _fill_cart(storefront, quantity=1, stock=5, price=10, product_id=1, name="Desk Lamp"):
    product = Product.model_validate(product_json(product_id=product_id, name=name, price=price, stock=stock))
    for _ in range(quantity):
        storefront.cart.add_item(product)


@pytest.fixture
def addresses(backend):
    backend.add_json("GET", "/address/user/7", envelope([address_json(1), address_json(2, label="Work", is_default=True)]))


@pytest.fixture
async def flow(storefront, signed_in, addresses):
    _fill_cart(storefront, quantity=2)
    flow = storefront.checkout()
    await flow.start()
    return flow


class TestTotals:
    def test_delivery_adds_surcharge_pickup_does_not(self):
        assert compute_total(Decimal("100"), DeliveryMethod.DELIVERY, Decimal("5.99")) == Decimal("105.99")
        assert compute_total(Decimal("100"), DeliveryMethod.PICKUP, Decimal("5.99")) == Decimal("100")

    async def test_switching_method_changes_total(self, storefront, signed_in, addresses):
        _fill_cart(storefront, quantity=2, price=50)
        flow = storefront.checkout()
        draft = await flow.start()

        assert draft.subtotal == Decimal("100")
        assert draft.total == Decimal("105.99")
        flow.set_delivery_method(DeliveryMethod.PICKUP)
        assert draft.total == Decimal("100")
        assert draft.shipping == Decimal("0")
        assert flow.state is CheckoutState.ADDRESS_SELECTION

    def test_surcharge_comes_from_settings(self):
        draft = CheckoutDraft(shipping_surcharge=Decimal("7.50"))
        assert draft.total == Decimal("7.50")


class TestStart:
    async def test_requires_sign_in(self, storefront, navigator):
        _fill_cart(storefront)
        with pytest.raises(NotAuthenticatedError):
            await storefront.checkout().start()
        assert navigator.current == Route.SIGN_IN
        assert storefront.checkout().state is CheckoutState.IDLE

    async def test_requires_items(self, storefront, signed_in, navigator):
        with pytest.raises(EmptyCartError):
            await storefront.checkout().start()
        assert navigator.current == Route.HOME

    async def test_picks_default_address(self, flow):
        assert flow.state is CheckoutState.ADDRESS_SELECTION
        assert flow.draft.selected_address.id == 2
        assert [a.id for a in flow.addresses] == [1, 2]

    async def test_falls_back_to_first_address(self, storefront, signed_in, backend):
        backend.add_json("GET", "/address/user/7", envelope([address_json(4), address_json(5)]))
        _fill_cart(storefront)
        draft = await storefront.checkout().start()
        assert draft.selected_address.id == 4

    async def test_draft_is_a_copy_of_the_cart(self, flow, storefront):
        storefront.cart.set_quantity(1, 1)
        assert flow.draft.cart_lines[0].quantity == 2

    async def test_address_failure_is_reported(self, storefront, signed_in, backend, notifier):
        backend.add_json("GET", "/address/user/7", {"title": "Boom"}, status_code=500)
        _fill_cart(storefront)
        flow = storefront.checkout()
        await flow.start()
        assert flow.addresses == []
        assert flow.draft.selected_address is None
        assert notifier.messages[-1][0] == "error"

    async def test_resumes_saved_draft(self, storefront, signed_in, addresses):
        _fill_cart(storefront)
        first = storefront.checkout()
        await first.start()
        first.set_notes("Ring twice")
        first.abandon()

        draft = await first.start()
        assert draft.notes == "Ring twice"

    async def test_resumed_draft_picks_up_items_added_since(self, storefront, signed_in, addresses, backend):
        _fill_cart(storefront)
        flow = storefront.checkout()
        await flow.start()
        flow.select_address(1)
        flow.set_notes("Ring twice")
        flow.abandon()
        _fill_cart(storefront, product_id=2, name="Chair", price=40)

        draft = await flow.start()

        assert [line.product_id for line in draft.cart_lines] == [1, 2]
        assert draft.subtotal == Decimal("50")
        assert draft.selected_address.id == 1
        assert draft.notes == "Ring twice"

        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=5)]))
        backend.add_json("GET", "/product/specified/2", envelope([product_json(2, name="Chair", stock=5)]))
        backend.add_json("POST", "/order/create", envelope([{"id": 15}]))
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.BLIK)
        await flow.confirm()

        sent = request_json(backend.calls("POST", "/order/create")[0])
        assert [item["id"] for item in sent["cartItems"]] == [1, 2]
        assert storefront.cart.snapshot().is_empty

    async def test_unreadable_draft_is_discarded(self, storefront, signed_in, addresses):
        storefront.session_storage.set(CHECKOUT_DRAFT_KEY, "{broken")
        _fill_cart(storefront)
        draft = await storefront.checkout().start()
        assert draft.cart_lines[0].product_id == 1


class TestAddressSelection:
    async def test_select_address(self, flow):
        assert flow.select_address(1).id == 1
        assert flow.draft.selected_address.id == 1

    async def test_select_unknown_address(self, flow):
        with pytest.raises(CheckoutStateError):
            flow.select_address(99)

    async def test_create_address_selects_it(self, flow, backend):
        listed = [address_json(1), address_json(2, is_default=True), address_json(3, label="Cabin")]
        backend.add_json("POST", "/address/create", envelope([address_json(3, label="Cabin")]))
        backend.add_json("GET", "/address/user/7", envelope(listed))
        form = AddressForm(
            label=" Cabin ",
            street="2 Lake Rd",
            city="Lakeside",
            postal_code="99999",
            country="US",
            phone_area_code="+1",
            phone_number="5550199",
        )

        created = await flow.create_address(form)

        assert created.id == 3
        assert flow.draft.selected_address.id == 3
        sent = request_json(backend.calls("POST", "/address/create")[0])
        assert sent["label"] == "Cabin"
        assert sent["userId"] == 7
        assert sent["postalCode"] == "99999"

    async def test_create_address_validates_locally(self, flow, backend):
        with pytest.raises(ValidationError) as exc_info:
            await flow.create_address(AddressForm(label="Cabin", street="  "))
        assert exc_info.value.field == "street"
        assert backend.calls("POST", "/address/create") == []

    async def test_create_address_failure(self, flow, backend, notifier):
        backend.add_json("POST", "/address/create", {"title": "Boom"}, status_code=500)
        form = AddressForm(
            label="Cabin", street="x", city="y", postal_code="1", country="US", phone_area_code="1", phone_number="2"
        )
        with pytest.raises(APIError):
            await flow.create_address(form)
        assert notifier.messages[-1] == ("error", "Failed to save the address. Please try again.")
        assert flow.state is CheckoutState.ADDRESS_SELECTION

    async def test_delivery_needs_an_address(self, storefront, signed_in, backend):
        backend.add_json("GET", "/address/user/7", envelope([]))
        _fill_cart(storefront)
        flow = storefront.checkout()
        await flow.start()

        with pytest.raises(CheckoutStateError):
            flow.proceed_to_payment()
        flow.set_delivery_method(DeliveryMethod.PICKUP)
        flow.proceed_to_payment()
        assert flow.state is CheckoutState.PAYMENT_SELECTION


class TestConfirm:
    async def test_requires_payment_method(self, flow):
        flow.proceed_to_payment()
        with pytest.raises(CheckoutStateError):
            await flow.confirm()
        assert flow.state is CheckoutState.PAYMENT_SELECTION

    async def test_blocked_outside_payment_selection(self, flow):
        with pytest.raises(CheckoutStateError):
            await flow.confirm()
        with pytest.raises(CheckoutStateError):
            flow.select_payment_method(PaymentMethod.BLIK)

    async def test_successful_order(self, flow, storefront, backend, navigator, notifier):
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=5)]))
        backend.add_json("POST", "/order/create", envelope([{"id": 11}]))
        flow.select_address(1)
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.CREDIT_CARD)
        flow.set_notes("  Leave at the door ")

        response = await flow.confirm()

        assert response.success is True
        assert flow.state is CheckoutState.COMPLETED
        assert flow.transitions[-3:] == [
            CheckoutState.INVENTORY_VALIDATION,
            CheckoutState.SUBMITTING,
            CheckoutState.COMPLETED,
        ]
        assert storefront.cart.snapshot().is_empty
        assert storefront.session_storage.get(CHECKOUT_DRAFT_KEY) is None
        assert navigator.current == Route.ORDER_HISTORY
        assert notifier.messages[-1] == ("info", "Payment successful! Order has been placed.")

        orders = backend.calls("POST", "/order/create")
        assert len(orders) == 1
        sent = request_json(orders[0])
        assert sent["userId"] == 7
        assert sent["deliveryMethod"] == "delivery"
        assert sent["paymentMethodId"] == 2
        assert sent["selectedAddress"]["id"] == 1
        assert sent["notes"] == "Leave at the door"
        assert Decimal(str(sent["total"])) == Decimal("25.99")
        assert sent["cartItems"][0]["quantity"] == 2

    async def test_pickup_sends_no_address(self, flow, backend):
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=5)]))
        backend.add_json("POST", "/order/create", envelope([{"id": 11}]))
        flow.set_delivery_method(DeliveryMethod.PICKUP)
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.CASH_ON_PICKUP)

        await flow.confirm()

        sent = request_json(backend.calls("POST", "/order/create")[0])
        assert sent["deliveryMethod"] == "pickup"
        assert sent["selectedAddress"] is None
        assert Decimal(str(sent["total"])) == Decimal("20")

    async def test_insufficient_stock_clamps_cart_and_stops(self, storefront, signed_in, addresses, backend, notifier):
        _fill_cart(storefront, quantity=3)
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=1)]))
        flow = storefront.checkout()
        await flow.start()
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.BLIK)

        with pytest.raises(InventoryValidationError) as exc_info:
            await flow.confirm()

        assert "Desk Lamp" in exc_info.value.message
        assert exc_info.value.adjustments[0].available == 1
        assert storefront.cart.snapshot().line(1).quantity == 1
        assert flow.draft.cart_lines[0].quantity == 1
        assert flow.state is CheckoutState.PAYMENT_SELECTION
        assert backend.calls("POST", "/order/create") == []
        assert notifier.messages[-1][0] == "error"

    async def test_reconfirm_after_clamp(self, storefront, signed_in, addresses, backend):
        _fill_cart(storefront, quantity=3)
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=1)]))
        backend.add_json("POST", "/order/create", envelope([{"id": 12}]))
        flow = storefront.checkout()
        await flow.start()
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.BLIK)
        with pytest.raises(InventoryValidationError):
            await flow.confirm()

        await flow.confirm()

        assert flow.state is CheckoutState.COMPLETED
        assert request_json(backend.calls("POST", "/order/create")[0])["cartItems"][0]["quantity"] == 1

    async def test_sold_out_line_is_removed(self, storefront, signed_in, addresses, backend):
        _fill_cart(storefront, quantity=1, product_id=1)
        _fill_cart(storefront, quantity=1, product_id=2, name="Chair")
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=5)]))
        backend.add_json("GET", "/product/specified/2", envelope([product_json(2, name="Chair", stock=0)]))
        flow = storefront.checkout()
        await flow.start()
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.PAYPAL)

        with pytest.raises(InventoryValidationError, match="Chair: out of stock"):
            await flow.confirm()
        assert [line.product_id for line in flow.draft.cart_lines] == [1]

    async def test_stock_checks_run_concurrently(self, storefront, signed_in, addresses, backend):
        _fill_cart(storefront, product_id=1)
        _fill_cart(storefront, product_id=2, name="Chair")
        backend.add_json("POST", "/order/create", envelope([{"id": 13}]))
        in_flight = []
        peak = []

        async def lookup(request):
            in_flight.append(request)
            peak.append(len(in_flight))
            await asyncio.sleep(0.01)
            in_flight.remove(request)
            product_id = int(request.url.path.rsplit("/", 1)[-1])
            return httpx.Response(200, json=envelope([product_json(product_id, stock=5)]))

        backend.add("GET", "/product/specified/1", lookup)
        backend.add("GET", "/product/specified/2", lookup)
        flow = storefront.checkout()
        await flow.start()
        flow.set_delivery_method(DeliveryMethod.PICKUP)
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.GOOGLE_PAY)

        await flow.confirm()
        assert max(peak) == 2

    async def test_stock_lookup_failure(self, flow, backend, notifier):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend.add("GET", "/product/specified/1", refuse)
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.BLIK)

        with pytest.raises(NetworkError):
            await flow.confirm()
        assert flow.state is CheckoutState.PAYMENT_SELECTION
        assert backend.calls("POST", "/order/create") == []
        assert notifier.messages[-1][0] == "error"

    async def test_malformed_stock_reply_returns_to_payment(self, flow, backend, notifier):
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=-1)]))
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.BLIK)

        with pytest.raises(InvalidResponseError):
            await flow.confirm()

        assert flow.state is CheckoutState.PAYMENT_SELECTION
        assert backend.calls("POST", "/order/create") == []
        assert notifier.messages[-1] == ("error", "Could not verify product availability. Please try again.")

        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=5)]))
        backend.add_json("POST", "/order/create", envelope([{"id": 16}]))
        flow.select_payment_method(PaymentMethod.CREDIT_CARD)
        await flow.confirm()
        assert flow.state is CheckoutState.COMPLETED

    async def test_malformed_order_reply_is_a_failure(self, flow, storefront, backend, notifier):
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=5)]))
        backend.add_json("POST", "/order/create", {"success": True, "status": "OK"})
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.BLIK)

        with pytest.raises(InvalidResponseError):
            await flow.confirm()

        assert flow.state is CheckoutState.FAILED
        assert storefront.cart.count == 2
        assert notifier.messages[-1] == ("error", "Payment failed. Please try again.")

    async def test_failed_submission_keeps_draft(self, flow, storefront, backend, notifier):
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=5)]))
        backend.add_json("POST", "/order/create", {"title": "Payment declined"}, status_code=402)
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.APPLE_PAY)

        with pytest.raises(APIError):
            await flow.confirm()

        assert flow.state is CheckoutState.FAILED
        assert len(backend.calls("POST", "/order/create")) == 1
        assert storefront.cart.count == 2
        saved = json.loads(storefront.session_storage.get(CHECKOUT_DRAFT_KEY))
        assert saved["paymentMethodId"] == int(PaymentMethod.APPLE_PAY)
        assert notifier.messages[-1] == ("error", "Payment failed. Please try again.")

    async def test_rejected_submission_is_a_failure(self, flow, backend):
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=5)]))
        backend.add_json("POST", "/order/create", {"success": False, "detail": "Address outside delivery area"})
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.BLIK)

        with pytest.raises(APIError, match="outside delivery area"):
            await flow.confirm()
        assert flow.state is CheckoutState.FAILED

    async def test_retry_after_failure(self, flow, backend):
        backend.add_json("GET", "/product/specified/1", envelope([product_json(1, stock=5)]))
        backend.add_json("POST", "/order/create", {"title": "Payment declined"}, status_code=402)
        flow.proceed_to_payment()
        flow.select_payment_method(PaymentMethod.BLIK)
        with pytest.raises(APIError):
            await flow.confirm()

        backend.add_json("POST", "/order/create", envelope([{"id": 14}]))
        flow.select_payment_method(PaymentMethod.CREDIT_CARD)
        await flow.confirm()

        assert flow.state is CheckoutState.COMPLETED
        assert len(backend.calls("POST", "/order/create")) == 2

    async def test_back_to_address(self, flow):
        flow.proceed_to_payment()
        flow.back_to_address()
        assert flow.state is CheckoutState.ADDRESS_SELECTION

    async def test_abandon_can_discard_draft(self, flow, storefront):
        assert storefront.session_storage.get(CHECKOUT_DRAFT_KEY) is not None
        flow.abandon(discard_draft=True)
        assert flow.state is CheckoutState.IDLE
        assert flow.draft is None
        assert storefront.session_storage.get(CHECKOUT_DRAFT_KEY) is None


def test_payment_method_names():
    assert PaymentMethod(1).display_name == "BLIK"
    assert PaymentMethod.CASH_ON_PICKUP.display_name == "Cash on Pickup"
    draft = CheckoutDraft(payment_method_id=3)
    assert draft.payment_method_name() == "PayPal"
