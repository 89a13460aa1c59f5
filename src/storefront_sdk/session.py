"""
Session management.

Owns the stored bearer credential and answers "who is signed in" from the
claims embedded in it. Claims are read without verifying the signature:
they drive UI personalisation only, never an authorization decision. The
backend re-checks the credential on every call.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable, Optional

from jose import jwt
from jose.exceptions import JOSEError
from pydantic import ValidationError as PydanticValidationError

from .models.errors import StorefrontError
from .models.session import Identity, Role, SessionClaims
from .models.user import RegistrationForm
from .storage import TOKEN_KEY, KeyValueStore

if TYPE_CHECKING:
    from .resources.auth import AuthResource

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Credential holder for the current user.

    Decode failures of any kind are absorbed into ``None``: a malformed
    credential is treated exactly like a missing one. Expiry is checked
    against the clock on every call, never cached.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        auth: "AuthResource",
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.auth = auth
        self._clock = clock

    @property
    def credential(self) -> Optional[str]:
        return self.storage.get(TOKEN_KEY)

    def decode_credential(self) -> Optional[SessionClaims]:
        token = self.credential
        if not token:
            return None
        try:
            claims = jwt.get_unverified_claims(token)
            return SessionClaims.model_validate(claims)
        except (JOSEError, PydanticValidationError, ValueError, TypeError) as e:
            logger.debug(f"Stored credential could not be decoded: {e.__class__.__name__}")
            return None

    def is_authenticated(self) -> bool:
        claims = self.decode_credential()
        return claims is not None and claims.is_current(self._clock())

    def current_identity(self) -> Optional[Identity]:
        claims = self.decode_credential()
        if claims is None:
            return None
        return Identity.from_claims(claims)

    def is_admin(self) -> bool:
        """Advisory role check for showing admin navigation. Not a permission check."""
        identity = self.current_identity() if self.is_authenticated() else None
        return identity is not None and identity.role == Role.ADMIN

    async def login(self, identifier: str, secret: str) -> bool:
        """Sign in; on success the returned credential is stored durably.

        Never raises: any failure, including transport errors, yields False.
        """
        try:
            token = await self.auth.login(identifier, secret)
        except StorefrontError as e:
            logger.info(f"Login failed: {e.message}")
            return False
        if not token:
            logger.info("Login rejected by backend")
            return False
        self.storage.set(TOKEN_KEY, token)
        logger.info("Login succeeded")
        return True

    def logout(self) -> None:
        self.storage.delete(TOKEN_KEY)

    async def register(self, form: RegistrationForm) -> bool:
        """Create an account.

        Raises:
            ValidationError: when the form is incomplete; nothing is sent

        Returns:
            The backend's success flag; transport and API failures yield False
        """
        form.validate_form()
        try:
            response = await self.auth.register(form)
        except StorefrontError as e:
            logger.info(f"Registration failed: {e.message}")
            return False
        return response.success
