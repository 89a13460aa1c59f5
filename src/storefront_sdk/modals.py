"""
Blocking fault prompts raised by the HTTP fault interceptor.

The host owns at most one live prompt of each kind. Showing a prompt that is
already up returns the existing handle; hiding tears it down and notifies
listeners so a renderer can detach it from the screen.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional

from .ui import Navigator, Route

logger = logging.getLogger(__name__)


class ModalKind(str, Enum):
    SESSION_EXPIRED = "session_expired"
    FORBIDDEN = "forbidden"


MODAL_MESSAGES = {
    ModalKind.SESSION_EXPIRED: "Your session has expired. Please sign in again.",
    ModalKind.FORBIDDEN: "You are not authorized to perform this action.",
}

ModalListener = Callable[["ModalHandle"], None]


@dataclass
class ModalHandle:
    """A live prompt. Its single action tears it down."""

    kind: ModalKind
    host: "ModalHost"
    opened_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    closed: bool = False

    @property
    def message(self) -> str:
        return MODAL_MESSAGES[self.kind]

    def confirm(self) -> None:
        """Session-expired action: close, then go to sign-in."""
        self.host._hide(self.kind)
        if self.kind is ModalKind.SESSION_EXPIRED:
            self.host.navigate(Route.SIGN_IN)

    def dismiss(self) -> None:
        """Close without navigating."""
        self.host._hide(self.kind)


class ModalHost:
    """Process-wide owner of the session-expired and not-authorized prompts."""

    def __init__(self, navigator: Optional[Navigator] = None):
        self.navigator = navigator
        self._handles: Dict[ModalKind, ModalHandle] = {}
        self._show_listeners: List[ModalListener] = []
        self._hide_listeners: List[ModalListener] = []

    def on_show(self, listener: ModalListener) -> None:
        self._show_listeners.append(listener)

    def on_hide(self, listener: ModalListener) -> None:
        self._hide_listeners.append(listener)

    def navigate(self, route: str) -> None:
        if self.navigator is not None:
            self.navigator.navigate(route)

    def active(self, kind: ModalKind) -> Optional[ModalHandle]:
        return self._handles.get(kind)

    def is_showing(self, kind: ModalKind) -> bool:
        return kind in self._handles

    def show_session_expired(self) -> ModalHandle:
        return self._show(ModalKind.SESSION_EXPIRED)

    def hide_session_expired(self) -> None:
        self._hide(ModalKind.SESSION_EXPIRED)

    def show_forbidden(self) -> ModalHandle:
        return self._show(ModalKind.FORBIDDEN)

    def hide_forbidden(self) -> None:
        self._hide(ModalKind.FORBIDDEN)

    def _show(self, kind: ModalKind) -> ModalHandle:
        existing = self._handles.get(kind)
        if existing is not None:
            return existing
        handle = ModalHandle(kind=kind, host=self)
        self._handles[kind] = handle
        logger.info(f"Showing {kind.value} prompt")
        for listener in list(self._show_listeners):
            listener(handle)
        return handle

    def _hide(self, kind: ModalKind) -> None:
        handle = self._handles.pop(kind, None)
        if handle is None:
            return
        handle.closed = True
        logger.debug(f"Closed {kind.value} prompt")
        for listener in list(self._hide_listeners):
            listener(handle)
