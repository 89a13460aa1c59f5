"""
Auth resource for the storefront SDK.

Login and registration take form fields, not JSON.
"""
from __future__ import annotations

from typing import Optional

from ..models.envelope import ApiResponse
from ..models.user import RegistrationForm
from .base import AsyncBaseResource


class AuthResource(AsyncBaseResource):
    """Credential issuing endpoints.

    Example:
        ```python
        token = await client.auth.login("ann@example.com", "secret")
        ```
    """

    async def login(self, email: str, password: str) -> Optional[str]:
        """Exchange email and password for a bearer credential.

        Returns:
            The credential string, or None when the backend reported failure
            or sent no usable token
        """
        response = await self._post("/auth/login", form={"email": email, "password": password})
        if not response.success:
            return None
        token = response.first()
        if isinstance(token, str) and token.strip():
            return token
        return None

    async def register(self, form: RegistrationForm) -> ApiResponse:
        """Create an account from an already validated form."""
        return await self._post("/auth/register", form=form.form_fields())
