"""Addresses resource for the storefront SDK."""
from __future__ import annotations

from typing import Any, Dict, List, Union

from ..models.address import UserAddress
from ..models.errors import APIError
from .base import AsyncBaseResource


class AddressesResource(AsyncBaseResource):
    """A user's delivery addresses.

    Example:
        ```python
        addresses = await client.addresses.list_by_user(identity.id)
        ```
    """

    async def list_by_user(self, user_id: Union[int, str]) -> List[UserAddress]:
        """List the addresses of one user."""
        response = await self._get(f"/address/user/{user_id}")
        return [self._model(UserAddress, a) for a in response.items()]

    async def create(self, address: Dict[str, Any]) -> UserAddress:
        """Create an address from a creation payload.

        Raises:
            APIError: when the backend accepted the call but returned no address
        """
        response = await self._post("/address/create", address)
        data = response.first()
        if not isinstance(data, dict):
            raise APIError(
                response.detail or response.title or "Address was not saved",
                status_code=response.status or 500,
            )
        return self._model(UserAddress, data)
