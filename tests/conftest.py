"""
Pytest configuration and fixtures for storefront SDK tests.
"""
from __future__ import annotations

import json
import time
from typing import Any, Callable, Optional, Union

import httpx
import pytest
from jose import jwt

from storefront_sdk import (
    LoggingNavigator,
    LoggingNotifier,
    MemoryStore,
    Storefront,
    StorefrontClient,
    StorefrontSettings,
    TOKEN_KEY,
)
from storefront_sdk.models.session import ROLE_CLAIM_URI

API_PREFIX = "/api/v1"
BASE_URL = f"https://shop.test{API_PREFIX}"

Handler = Callable[[httpx.Request], httpx.Response]


def make_token(
    sub: Union[int, str] = 7,
    given_name: str = "Ann",
    family_name: str = "Lee",
    role: str = "User",
    exp: Optional[int] = None,
    role_claim: str = "role",
    **extra: Any,
) -> str:
    """Build a signed credential; the SDK only ever reads its claims."""
    claims = {
        "sub": str(sub),
        "given_name": given_name,
        "family_name": family_name,
        role_claim: role,
        "exp": exp if exp is not None else int(time.time()) + 3600,
        **extra,
    }
    return jwt.encode(claims, "test-secret", algorithm="HS256")


def envelope(data: Any = None, success: bool = True, **fields: Any) -> dict:
    body = {"success": success, "data": data}
    body.update(fields)
    return body


def product_json(
    product_id: int = 1,
    name: str = "Desk Lamp",
    price: Union[int, float] = 10,
    stock: int = 5,
    category: str = "Lighting",
) -> dict:
    return {
        "id": product_id,
        "name": name,
        "category": category,
        "description": f"{name} description",
        "price": price,
        "stock": stock,
        "base64Image": f"img-{product_id}",
        "isVisible": True,
    }


def address_json(address_id: int = 1, label: str = "Home", is_default: bool = False) -> dict:
    return {
        "id": address_id,
        "label": label,
        "street": "1 Main St",
        "city": "Springfield",
        "postalCode": "12345",
        "country": "US",
        "phoneAreaCode": "+1",
        "phoneNumber": "5550100",
        "isDefault": is_default,
    }


class MockBackend:
    """Route table served through ``httpx.MockTransport``.

    Routes are keyed by method and the path below the API prefix. A route is
    either a JSON body (answered with 200), an ``httpx.Response`` or a
    handler taking the request. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, reply: Any) -> None:
        self.routes[(method.upper(), path)] = reply

    def add_json(self, method: str, path: str, body: Any, status_code: int = 200, headers=None) -> None:
        self.add(method, path, httpx.Response(status_code, json=body, headers=headers))

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and _local_path(r) == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, _local_path(request))
        if key not in self.routes:
            raise AssertionError(f"No mocked response for {key[0]} {key[1]}. Available: {sorted(self.routes)}")
        reply = self.routes[key]
        if callable(reply):
            return reply(request)
        if isinstance(reply, httpx.Response):
            return httpx.Response(reply.status_code, headers=reply.headers, content=reply.content)
        return httpx.Response(200, json=reply)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def _local_path(request: httpx.Request) -> str:
    path = request.url.path
    return path[len(API_PREFIX):] if path.startswith(API_PREFIX) else path


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode("utf-8"))


@pytest.fixture
def settings(tmp_path):
    return StorefrontSettings(
        api_base_url=BASE_URL,
        storage_path=tmp_path / "storage.json",
        suggestion_debounce_seconds=0.01,
    )


@pytest.fixture
def storage():
    return MemoryStore()


@pytest.fixture
def backend():
    return MockBackend()


@pytest.fixture
async def client(settings, storage, backend):
    client = StorefrontClient(settings=settings, storage=storage, transport=backend.transport)
    yield client
    await client.close()


@pytest.fixture
def navigator():
    return LoggingNavigator()


@pytest.fixture
def notifier():
    return LoggingNotifier()


@pytest.fixture
async def storefront(client, settings, navigator, notifier):
    storefront = Storefront(client=client, settings=settings, navigator=navigator, notifier=notifier)
    yield storefront
    await storefront.close()


@pytest.fixture
def signed_in(storage):
    """Store a current credential for user 7."""
    token = make_token()
    storage.set(TOKEN_KEY, token)
    return token


@pytest.fixture
def admin_token():
    return make_token(sub=1, given_name="Root", family_name="Admin", role="Admin", role_claim=ROLE_CLAIM_URI)
