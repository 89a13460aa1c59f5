"""
Checkout orchestration.

Turns the cart, a chosen address and a payment choice into one order:

    idle -> address_selection -> payment_selection -> inventory_validation
         -> submitting -> completed | failed

The draft works on a copy of the cart lines taken at start, so edits made to
the cart from another view do not silently change the order being built.
Inventory validation re-reads stock for every line concurrently and writes
any shortfall back into the cart store before anything is submitted.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .cart import CartStore
from .models.address import AddressForm, UserAddress
from .models.checkout import (
    CheckoutDraft,
    CheckoutState,
    DeliveryMethod,
    PaymentMethod,
    StockAdjustment,
)
from .models.envelope import ApiResponse
from .models.errors import (
    APIError,
    CheckoutStateError,
    EmptyCartError,
    InventoryValidationError,
    NotAuthenticatedError,
    StorefrontError,
)
from .models.order import OrderSubmission
from .models.session import Identity
from .session import SessionManager
from .storage import CHECKOUT_DRAFT_KEY, KeyValueStore, MemoryStore
from .ui import LoggingNavigator, LoggingNotifier, Navigator, Notifier, Route

if TYPE_CHECKING:
    from .client import StorefrontClient

logger = logging.getLogger(__name__)

SELECTION_STATES = (
    CheckoutState.ADDRESS_SELECTION,
    CheckoutState.PAYMENT_SELECTION,
    CheckoutState.FAILED,
)


class CheckoutOrchestrator:
    """
    Short-lived state machine for one checkout.

    Every blocked transition raises ``CheckoutStateError`` and leaves the
    state untouched. Network failures are reported through the notifier and
    re-raised; nothing is retried automatically.
    """

    def __init__(
        self,
        client: "StorefrontClient",
        session: SessionManager,
        cart: CartStore,
        draft_storage: Optional[KeyValueStore] = None,
        navigator: Optional[Navigator] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.client = client
        self.session = session
        self.cart = cart
        self.draft_storage = draft_storage if draft_storage is not None else MemoryStore()
        self.navigator = navigator or LoggingNavigator()
        self.notifier = notifier or LoggingNotifier()
        self.shipping_surcharge = client.settings.shipping_surcharge

        self.state = CheckoutState.IDLE
        self.transitions: List[CheckoutState] = []
        self.draft: Optional[CheckoutDraft] = None
        self.addresses: List[UserAddress] = []
        self.identity: Optional[Identity] = None
        self.order_response: Optional[ApiResponse] = None

    # ---- entry ---------------------------------------------------------

    async def start(self) -> CheckoutDraft:
        """Enter address selection.

        Copies the current cart. Delivery, address, payment and notes chosen
        on an earlier visit are restored from transient storage.

        Raises:
            NotAuthenticatedError: no current credential (sent to sign-in)
            EmptyCartError: nothing to check out (sent home)
        """
        if not self.session.is_authenticated():
            self.navigator.navigate(Route.SIGN_IN)
            raise NotAuthenticatedError()
        snapshot = self.cart.snapshot()
        if snapshot.is_empty:
            self.navigator.navigate(Route.HOME)
            raise EmptyCartError()

        self.identity = self.session.current_identity()
        self.order_response = None
        self.draft = CheckoutDraft(
            cart_lines=[line.model_copy() for line in snapshot.lines],
            shipping_surcharge=self.shipping_surcharge,
        )
        saved = self._load_draft()
        if saved is not None:
            # selections carry over; the lines always come from the cart as it is now
            self.draft.delivery_method = saved.delivery_method
            self.draft.selected_address = saved.selected_address
            self.draft.payment_method_id = saved.payment_method_id
            self.draft.notes = saved.notes
        self._transition(CheckoutState.ADDRESS_SELECTION)
        self._save_draft()
        await self.load_addresses()
        return self.draft

    # ---- address selection ---------------------------------------------

    async def load_addresses(self) -> List[UserAddress]:
        """Fetch the user's addresses and pick one.

        Keeps the current selection when it is still listed, else the
        default address, else the first, else none. A failed fetch is
        reported and leaves the list empty.
        """
        draft = self._require_draft()
        try:
            self.addresses = await self.client.addresses.list_by_user(self.identity.id)
        except StorefrontError as e:
            logger.warning(f"Loading addresses failed: {e}")
            self.notifier.error("Failed to load your addresses. Please try again.")
            self.addresses = []
            return self.addresses

        current = draft.selected_address
        keep = current is not None and any(a.id == current.id for a in self.addresses)
        if not keep:
            default = next((a for a in self.addresses if a.is_default), None)
            draft.selected_address = default or (self.addresses[0] if self.addresses else None)
        self._save_draft()
        return self.addresses

    def select_address(self, address_id: int) -> UserAddress:
        self._require_state(*SELECTION_STATES)
        draft = self._require_draft()
        for address in self.addresses:
            if address.id == address_id:
                draft.selected_address = address
                self._save_draft()
                return address
        raise CheckoutStateError(f"Unknown address {address_id}", state=self.state.value)

    async def create_address(self, form: AddressForm) -> UserAddress:
        """Save a new address, reload the list and select the new one.

        Raises:
            ValidationError: a required field is blank; nothing is sent
            StorefrontError: the save failed (reported; the form can be resubmitted)
        """
        self._require_state(CheckoutState.ADDRESS_SELECTION)
        draft = self._require_draft()
        form.validate_required()
        try:
            created = await self.client.addresses.create(form.to_address(self.identity.id))
        except StorefrontError as e:
            logger.warning(f"Saving address failed: {e}")
            self.notifier.error("Failed to save the address. Please try again.")
            raise

        await self.load_addresses()
        listed = next((a for a in self.addresses if created.id is not None and a.id == created.id), None)
        if listed is None:
            listed = created
            self.addresses.append(created)
        draft.selected_address = listed
        self._save_draft()
        return listed

    def set_delivery_method(self, method: DeliveryMethod) -> CheckoutDraft:
        """Switch between delivery and pickup; the total follows, the state does not."""
        self._require_state(*SELECTION_STATES)
        draft = self._require_draft()
        draft.delivery_method = DeliveryMethod(method)
        self._save_draft()
        return draft

    def proceed_to_payment(self) -> None:
        self._require_state(CheckoutState.ADDRESS_SELECTION)
        self._require_destination()
        self._transition(CheckoutState.PAYMENT_SELECTION)

    # ---- payment selection ---------------------------------------------

    def back_to_address(self) -> None:
        self._require_state(CheckoutState.PAYMENT_SELECTION, CheckoutState.FAILED)
        self._transition(CheckoutState.ADDRESS_SELECTION)

    def select_payment_method(self, method: PaymentMethod) -> None:
        self._require_state(CheckoutState.PAYMENT_SELECTION, CheckoutState.FAILED)
        draft = self._require_draft()
        draft.payment_method_id = int(PaymentMethod(method))
        self._save_draft()

    def set_notes(self, notes: Optional[str]) -> None:
        self._require_state(*SELECTION_STATES)
        draft = self._require_draft()
        draft.notes = notes.strip() if notes and notes.strip() else None
        self._save_draft()

    # ---- confirmation --------------------------------------------------

    async def confirm(self) -> ApiResponse:
        """Re-validate stock, then submit the order exactly once.

        Raises:
            CheckoutStateError: no payment method, or delivery without address
            InventoryValidationError: the cart was clamped to current stock;
                back in payment selection for re-confirmation
            StorefrontError: stock lookup or order submission failed
        """
        self._require_state(CheckoutState.PAYMENT_SELECTION, CheckoutState.FAILED)
        draft = self._require_draft()
        if draft.payment_method_id is None:
            raise CheckoutStateError("Choose a payment method first", state=self.state.value)
        self._require_destination()
        if not draft.cart_lines:
            raise EmptyCartError()

        self._transition(CheckoutState.INVENTORY_VALIDATION)
        adjustments = await self._validate_inventory(draft)
        if adjustments:
            draft.cart_lines = [line.model_copy() for line in self.cart.snapshot().lines]
            self._save_draft()
            self._transition(CheckoutState.PAYMENT_SELECTION)
            error = InventoryValidationError(adjustments)
            self.notifier.error(error.message)
            raise error

        self._transition(CheckoutState.SUBMITTING)
        return await self._submit(draft)

    async def _validate_inventory(self, draft: CheckoutDraft) -> List[StockAdjustment]:
        lines = list(draft.cart_lines)
        try:
            products = await asyncio.gather(
                *(self.client.products.get(line.product_id) for line in lines)
            )
        except StorefrontError as e:
            logger.warning(f"Stock validation failed: {e}")
            self._transition(CheckoutState.PAYMENT_SELECTION)
            self.notifier.error("Could not verify product availability. Please try again.")
            raise

        adjustments: List[StockAdjustment] = []
        for line, product in zip(lines, products):
            self.cart.reconcile_stock(line.product_id, product.stock)
            if line.quantity > product.stock:
                adjustment = StockAdjustment(
                    product_id=line.product_id,
                    name=line.display_name,
                    requested=line.quantity,
                    available=product.stock,
                )
                logger.warning(f"Stock adjusted: {adjustment.describe()}")
                adjustments.append(adjustment)
        return adjustments

    async def _submit(self, draft: CheckoutDraft) -> ApiResponse:
        delivery = DeliveryMethod(draft.delivery_method) is DeliveryMethod.DELIVERY
        submission = OrderSubmission(
            user_id=self.identity.id if self.identity else None,
            delivery_method=DeliveryMethod(draft.delivery_method).value,
            selected_address=draft.selected_address.to_dict() if delivery and draft.selected_address else None,
            payment_method_id=draft.payment_method_id,
            cart_items=[line.to_dict() for line in draft.cart_lines],
            total=draft.total,
            notes=draft.notes,
        )
        try:
            response = await self.client.orders.create(submission)
            if not response.success:
                raise APIError(
                    response.detail or response.title or "Order was not accepted",
                    status_code=response.status or 422,
                )
        except StorefrontError as e:
            logger.error(f"Order submission failed: {e}")
            self._transition(CheckoutState.FAILED)
            self._save_draft()
            self.notifier.error("Payment failed. Please try again.")
            raise

        self.order_response = response
        self._transition(CheckoutState.COMPLETED)
        self.cart.clear()
        self.draft_storage.delete(CHECKOUT_DRAFT_KEY)
        self.notifier.info("Payment successful! Order has been placed.")
        self.navigator.navigate(Route.ORDER_HISTORY)
        return response

    # ---- leaving -------------------------------------------------------

    def abandon(self, discard_draft: bool = False) -> None:
        """Drop in-memory state; the stored draft stays resumable unless discarded."""
        if discard_draft:
            self.draft_storage.delete(CHECKOUT_DRAFT_KEY)
        self.draft = None
        self.addresses = []
        self._transition(CheckoutState.IDLE)

    # ---- helpers -------------------------------------------------------

    def _transition(self, new_state: CheckoutState) -> None:
        if new_state is not self.state:
            logger.info(f"Checkout {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.transitions.append(new_state)

    def _require_state(self, *allowed: CheckoutState) -> None:
        if self.state not in allowed:
            expected = ", ".join(s.value for s in allowed)
            raise CheckoutStateError(
                f"Not allowed in state {self.state.value} (expected {expected})",
                state=self.state.value,
            )

    def _require_draft(self) -> CheckoutDraft:
        if self.draft is None:
            raise CheckoutStateError("Checkout has not been started", state=self.state.value)
        return self.draft

    def _require_destination(self) -> None:
        draft = self._require_draft()
        if DeliveryMethod(draft.delivery_method) is DeliveryMethod.DELIVERY and draft.selected_address is None:
            raise CheckoutStateError("Select a delivery address or choose pickup", state=self.state.value)

    def _save_draft(self) -> None:
        if self.draft is not None:
            self.draft_storage.set(CHECKOUT_DRAFT_KEY, json.dumps(self.draft.to_dict()))

    def _load_draft(self) -> Optional[CheckoutDraft]:
        raw = self.draft_storage.get(CHECKOUT_DRAFT_KEY)
        if not raw:
            return None
        try:
            draft = CheckoutDraft.model_validate(json.loads(raw))
        except (ValueError, PydanticValidationError) as e:
            logger.warning(f"Discarding unreadable checkout draft: {e.__class__.__name__}")
            self.draft_storage.delete(CHECKOUT_DRAFT_KEY)
            return None
        logger.info("Restoring selections from saved checkout draft")
        return draft
