"""
Search-as-you-type suggestions.

Each keystroke restarts a fixed delay; only the query still pending when the
delay runs out is sent. A request that is already in flight is never
aborted, but its result is dropped if a newer query has been typed since.
"""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, List, Optional

from .models.errors import StorefrontError
from .models.product import Product

if TYPE_CHECKING:
    from .resources.products import ProductsResource

logger = logging.getLogger(__name__)

SuggestionListener = Callable[[str, List[Product]], None]


class SuggestionSearch:
    """Debounced suggestion fetcher publishing results for the latest query only."""

    def __init__(
        self,
        products: "ProductsResource",
        delay: float = 0.3,
        on_results: Optional[SuggestionListener] = None,
        on_error: Optional[Callable[[str, StorefrontError], None]] = None,
    ):
        self.products = products
        self.delay = delay
        self.on_results = on_results
        self.on_error = on_error
        self.latest_query: str = ""
        self.results: List[Product] = []
        self._token = 0
        self._timer: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()

    def update(self, query: str) -> None:
        """Register a keystroke. Must be called from the running event loop."""
        self._token += 1
        self.latest_query = query
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        if not query.strip():
            self._timer = None
            self._publish(self._token, query, [])
            return
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_fetch(self._token, query))

    async def _wait_then_fetch(self, token: int, query: str) -> None:
        await asyncio.sleep(self.delay)
        # past the delay: the request below is allowed to finish even if superseded
        fetch = asyncio.ensure_future(self._fetch(token, query))
        self._inflight.add(fetch)
        fetch.add_done_callback(self._inflight.discard)

    async def _fetch(self, token: int, query: str) -> None:
        try:
            found = await self.products.suggestions(query)
        except StorefrontError as e:
            if token == self._token:
                logger.warning(f"Suggestions for {query!r} failed: {e}")
                if self.on_error is not None:
                    self.on_error(query, e)
            return
        self._publish(token, query, found)

    def _publish(self, token: int, query: str, found: List[Product]) -> None:
        if token != self._token:
            logger.debug(f"Dropping stale suggestions for {query!r}")
            return
        self.results = found
        if self.on_results is not None:
            self.on_results(query, found)

    async def settle(self) -> None:
        """Wait for the pending delay and every request already sent."""
        if self._timer is not None:
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
        if self._inflight:
            await asyncio.gather(*list(self._inflight))

    def close(self) -> None:
        """Cancel a pending (not yet sent) query."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
