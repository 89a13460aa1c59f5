"""Seams to the presentation layer: navigation and user-visible messages."""
from __future__ import annotations

import logging
from typing import List, Protocol

logger = logging.getLogger(__name__)


class Route:
    HOME = "/"
    SIGN_IN = "/signin"
    REGISTER = "/register"
    CHECKOUT = "/checkout"
    SUMMARY = "/summary"
    ORDER_HISTORY = "/user-dashboard/orders"
    ADMIN_DASHBOARD = "/admin-dashboard"


class Navigator(Protocol):
    def navigate(self, route: str) -> None: ...


class Notifier(Protocol):
    """Blocking message shown to the user (an alert in a browser)."""

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNavigator:
    """Navigator that records the route it was sent to."""

    def __init__(self) -> None:
        self.current: str = Route.HOME
        self.history: List[str] = []

    def navigate(self, route: str) -> None:
        logger.debug(f"Navigate {self.current} -> {route}")
        self.history.append(route)
        self.current = route


class LoggingNotifier:
    """Notifier that writes to the log and keeps the messages for inspection."""

    def __init__(self) -> None:
        self.messages: List[tuple[str, str]] = []

    def info(self, message: str) -> None:
        logger.info(message)
        self.messages.append(("info", message))

    def error(self, message: str) -> None:
        logger.error(message)
        self.messages.append(("error", message))
