"""
Storefront Python SDK

Async client for the shop backend: catalog, categories, addresses, orders,
users and authentication.

Example usage:
    ```python
    from storefront_sdk import StorefrontClient

    async with StorefrontClient() as client:
        products = await client.products.list_visible()
        addresses = await client.addresses.list_by_user(7)
    ```
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .config import StorefrontSettings, get_settings
from .interceptor import FaultInterceptor
from .modals import ModalHost
from .models.errors import APIError, NetworkError
from .resources.addresses import AddressesResource
from .resources.auth import AuthResource
from .resources.categories import CategoriesResource
from .resources.orders import OrdersResource
from .resources.products import ProductsResource
from .resources.users import UsersResource
from .storage import FileStore, KeyValueStore

logger = logging.getLogger(__name__)


class StorefrontClient:
    """
    Storefront API client.

    Provides access to all backend resources:
    - auth: Login and registration
    - products: Catalog browsing, suggestions and admin product management
    - categories: Category listing and activation (admin)
    - addresses: A user's delivery addresses
    - orders: Order history and order creation
    - users: User administration

    Every request passes through the fault interceptor, which attaches the
    stored bearer credential and reacts to 401/403 responses. Failed calls
    are never retried automatically.

    Args:
        base_url: API base URL (default: settings ``api_base_url``)
        storage: Durable store holding the credential (default: settings ``storage_path``)
        modals: Host for the session-expired / not-authorized prompts
        settings: Settings instance (default: environment)
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests, proxies)
    """

    USER_AGENT = "storefront-sdk-python/0.1.0"

    def __init__(
        self,
        base_url: Optional[str] = None,
        storage: Optional[KeyValueStore] = None,
        modals: Optional[ModalHost] = None,
        settings: Optional[StorefrontSettings] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self._base_url = (base_url or self.settings.api_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else self.settings.timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        self.storage = storage if storage is not None else FileStore(self.settings.storage_path)
        self.modals = modals or ModalHost()
        self.interceptor = FaultInterceptor(self.storage, self.modals)

        # Initialize resources
        self.auth = AuthResource(self)
        self.products = ProductsResource(self)
        self.categories = CategoriesResource(self)
        self.addresses = AddressesResource(self)
        self.orders = OrdersResource(self)
        self.users = UsersResource(self)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "Accept": "application/json",
                    "User-Agent": self.USER_AGENT,
                },
                timeout=self._timeout,
                verify=self.settings.verify_tls,
                transport=self._transport,
                event_hooks=self.interceptor.event_hooks(),
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        data: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Make one HTTP request and decode the JSON body.

        Raises:
            APIError: (or a subclass) for any 4xx/5xx response
            NetworkError: when no response was received
        """
        client = await self._get_client()
        try:
            response = await client.request(
                method=method,
                url=path,
                params=params,
                json=json,
                data=data,
            )
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise NetworkError(f"Could not reach the shop backend ({e.__class__.__name__})", cause=e) from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            error = APIError.from_response(response.status_code, body)
            logger.debug(f"{method} {path} -> {response.status_code}: {error.message}")
            raise error

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "StorefrontClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
