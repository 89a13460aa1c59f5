"""
HTTP fault interceptor.

Installed as httpx event hooks on the one ``AsyncClient`` every resource
shares, so it sees each outbound request and each response:

- requests get ``Authorization: Bearer <credential>`` when one is stored;
- a 401 whose payload names a token problem wipes the stored credential and
  raises the session-expired prompt;
- a 403 flagged ``Forbidden`` raises the not-authorized prompt.

The interceptor never swallows the response: the client still turns it into
an ``APIError`` so each caller's own error handling runs as well.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from .modals import ModalHost
from .storage import TOKEN_KEY, KeyValueStore

logger = logging.getLogger(__name__)

TOKEN_FAULT_MARKERS = ("token", "invalid", "expired")
FORBIDDEN_MARKER = "forbidden"

# Credential-issuing endpoints answer 401 for bad passwords; that is not a session fault.
DEFAULT_EXEMPT_PATHS = ("/auth/login", "/auth/register")


def _read_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _reason_texts(payload: Any) -> List[str]:
    if isinstance(payload, str):
        return [payload]
    if isinstance(payload, dict):
        return [
            str(payload[key])
            for key in ("title", "detail", "type", "message", "error", "error_description")
            if payload.get(key)
        ]
    return []


class FaultInterceptor:
    """Bearer injection plus the global reaction to auth failures."""

    def __init__(
        self,
        storage: KeyValueStore,
        modals: ModalHost,
        exempt_paths: Sequence[str] = DEFAULT_EXEMPT_PATHS,
    ):
        self.storage = storage
        self.modals = modals
        self.exempt_paths = tuple(exempt_paths)

    def event_hooks(self) -> Dict[str, list]:
        return {"request": [self._on_request], "response": [self._on_response]}

    async def _on_request(self, request: httpx.Request) -> None:
        self.attach_credential(request)

    async def _on_response(self, response: httpx.Response) -> None:
        if response.status_code in (401, 403):
            await response.aread()
            self.handle_fault(response)

    def attach_credential(self, request: httpx.Request) -> None:
        token = self.storage.get(TOKEN_KEY)
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def handle_fault(self, response: httpx.Response) -> None:
        """Apply the side effects for a 401/403 response. Never raises."""
        if self._is_exempt(response.request):
            return
        payload = _read_payload(response)
        if response.status_code == 401 and self.is_token_fault(response, payload):
            logger.warning(f"Credential rejected by {response.request.url.path}, clearing session")
            self.storage.delete(TOKEN_KEY)
            self.modals.show_session_expired()
        elif response.status_code == 403 and self.is_forbidden(payload):
            logger.warning(f"Access to {response.request.url.path} is forbidden")
            self.modals.show_forbidden()

    @staticmethod
    def is_token_fault(response: httpx.Response, payload: Any) -> bool:
        texts = _reason_texts(payload)
        challenge = response.headers.get("WWW-Authenticate")
        if challenge:
            texts.append(challenge)
        text = " ".join(texts).lower()
        return any(marker in text for marker in TOKEN_FAULT_MARKERS)

    @staticmethod
    def is_forbidden(payload: Any) -> bool:
        return any(FORBIDDEN_MARKER in text.lower() for text in _reason_texts(payload))

    def _is_exempt(self, request: Optional[httpx.Request]) -> bool:
        if request is None:
            return False
        path = request.url.path.rstrip("/")
        return any(path.endswith(exempt) for exempt in self.exempt_paths)
