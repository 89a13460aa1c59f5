"""
Base resource class for the storefront SDK.

Every resource goes through ``StorefrontClient._request`` so the fault
interceptor and error mapping apply uniformly.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..models.envelope import ApiResponse
from ..models.errors import InvalidResponseError

if TYPE_CHECKING:
    from ..client import StorefrontClient

M = TypeVar("M", bound=BaseModel)


class AsyncBaseResource:
    """Base class for async API resources.

    Attributes:
        _client: The client instance
    """

    def __init__(self, client: "StorefrontClient") -> None:
        self._client = client

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """Make a GET request.

        Args:
            path: API endpoint path
            params: Query parameters

        Returns:
            The decoded response envelope
        """
        return self._envelope(await self._client._request("GET", path, params=params))

    async def _post(
        self,
        path: str,
        data: Optional[Any] = None,
        form: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        """Make a POST request.

        Args:
            path: API endpoint path
            data: JSON request body
            form: Form fields, sent instead of a JSON body

        Returns:
            The decoded response envelope
        """
        return self._envelope(await self._client._request("POST", path, json=data, data=form))

    async def _put(self, path: str, data: Optional[Any] = None) -> ApiResponse:
        """Make a PUT request.

        Args:
            path: API endpoint path
            data: JSON request body

        Returns:
            The decoded response envelope
        """
        return self._envelope(await self._client._request("PUT", path, json=data))

    async def _delete(self, path: str) -> ApiResponse:
        """Make a DELETE request.

        Args:
            path: API endpoint path

        Returns:
            The decoded response envelope
        """
        return self._envelope(await self._client._request("DELETE", path))

    @staticmethod
    def _envelope(body: Any) -> ApiResponse:
        """Wrap a decoded body in the standard envelope.

        Endpoints that answer with a bare list or object (no envelope) are
        treated as a successful envelope around that payload.
        """
        if isinstance(body, dict) and ("success" in body or "data" in body):
            return AsyncBaseResource._model(ApiResponse, body)
        return ApiResponse(success=True, data=body if body != {} else None)

    @staticmethod
    def _model(model: Type[M], data: Any) -> M:
        """Validate one payload item.

        Raises:
            InvalidResponseError: the payload does not match ``model``
        """
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise InvalidResponseError(
                f"Unexpected {model.__name__} payload from the shop backend",
                details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            ) from e


__all__ = ["AsyncBaseResource"]
