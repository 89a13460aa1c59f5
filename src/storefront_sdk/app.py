"""
Application wiring.

One ``Storefront`` per process: a single client (and so a single fault
interceptor and modal host), the session, the cart and the transient
storage that carries a checkout draft between steps.
"""
from __future__ import annotations

from typing import Optional

from .cart import CartStore
from .checkout import CheckoutOrchestrator
from .client import StorefrontClient
from .config import StorefrontSettings, get_settings
from .search import SuggestionSearch
from .session import SessionManager
from .storage import KeyValueStore, MemoryStore
from .ui import LoggingNavigator, LoggingNotifier, Navigator, Notifier


class Storefront:
    """Shared client state for every view."""

    def __init__(
        self,
        client: Optional[StorefrontClient] = None,
        settings: Optional[StorefrontSettings] = None,
        navigator: Optional[Navigator] = None,
        notifier: Optional[Notifier] = None,
        session_storage: Optional[KeyValueStore] = None,
    ):
        self.settings = settings or (client.settings if client else get_settings())
        self.client = client or StorefrontClient(settings=self.settings)
        self.navigator = navigator or LoggingNavigator()
        self.notifier = notifier or LoggingNotifier()
        self.client.modals.navigator = self.navigator
        self.session_storage = session_storage if session_storage is not None else MemoryStore()

        self.session = SessionManager(self.client.storage, self.client.auth)
        self.cart = CartStore(self.client.storage)
        self._checkout: Optional[CheckoutOrchestrator] = None

    @property
    def modals(self):
        return self.client.modals

    def checkout(self) -> CheckoutOrchestrator:
        """The checkout flow; reused while it is in progress."""
        if self._checkout is None:
            self._checkout = CheckoutOrchestrator(
                self.client,
                self.session,
                self.cart,
                draft_storage=self.session_storage,
                navigator=self.navigator,
                notifier=self.notifier,
            )
        return self._checkout

    def suggestion_search(self, on_results=None) -> SuggestionSearch:
        return SuggestionSearch(
            self.client.products,
            delay=self.settings.suggestion_debounce_seconds,
            on_results=on_results,
        )

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "Storefront":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
