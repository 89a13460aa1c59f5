"""Orders resource for the storefront SDK."""
from __future__ import annotations

from typing import List, Union

from ..models.envelope import ApiResponse
from ..models.order import Order, OrderSubmission
from .base import AsyncBaseResource


class OrdersResource(AsyncBaseResource):
    """Order history and order creation."""

    async def list_by_user(self, user_id: Union[int, str]) -> List[Order]:
        """Order history of one user."""
        response = await self._get(f"/order/user/{user_id}")
        return [self._model(Order, o) for o in response.items()]

    async def create(self, submission: OrderSubmission) -> ApiResponse:
        """Submit an order. Called once per confirmation; never retried here."""
        return await self._post("/order/create", submission.to_dict())
