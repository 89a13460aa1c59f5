"""
Order history and customer summaries.

Pure helpers over already fetched ``Order`` and ``User`` lists: totals,
month-over-month trends and the admin role filter. Nothing here calls
the backend.
"""
from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from .models.order import Order
from .models.user import User

COMPLETED_STATUS = "completed"


@dataclass(frozen=True)
class Trend:
    """A percentage shown with an up or down marker."""

    percentage: int
    is_positive: bool

    def describe(self) -> str:
        return f"{'▲' if self.is_positive else '▼'} {self.percentage}%"


@dataclass(frozen=True)
class OrderSummary:
    total_orders: int
    completed_orders: int
    total_spent: Decimal
    average_order_value: Decimal


@dataclass(frozen=True)
class RoleCounts:
    total: int
    admins: int
    users: int


def _round_half_up(value: Decimal) -> int:
    return math.floor(value + Decimal("0.5"))


def _aware(moment: datetime) -> datetime:
    # naive timestamps from the backend are UTC
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def one_month_before(moment: datetime) -> datetime:
    """Same day and time one calendar month earlier, clamped to the month's last day."""
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def newest_first(orders: Iterable[Order]) -> List[Order]:
    """Order history sorted by placement time, undated orders last."""
    dated = [o for o in orders if o.created_at is not None]
    undated = [o for o in orders if o.created_at is None]
    return sorted(dated, key=lambda o: _aware(o.created_at), reverse=True) + undated


def total_spent(orders: Iterable[Order]) -> Decimal:
    return sum((order.total_amount for order in orders), Decimal("0"))


def items_count(order: Order) -> int:
    return sum(item.quantity for item in order.items)


def summarize_orders(orders: List[Order]) -> OrderSummary:
    spent = total_spent(orders)
    return OrderSummary(
        total_orders=len(orders),
        completed_orders=sum(1 for o in orders if o.status.lower() == COMPLETED_STATUS),
        total_spent=spent,
        average_order_value=spent / len(orders) if orders else Decimal("0"),
    )


def order_trend(orders: List[Order], now: Optional[datetime] = None) -> Trend:
    """Share of all orders placed within the last month.

    Counts as an upward trend when at least half of the history is recent.
    Fewer than two orders give a flat 0%.
    """
    if len(orders) < 2:
        return Trend(0, True)
    cutoff = one_month_before(_aware(now or datetime.now(timezone.utc)))
    recent = sum(1 for o in orders if o.created_at is not None and _aware(o.created_at) > cutoff)
    percentage = min(_round_half_up(Decimal(recent * 100) / len(orders)), 100)
    return Trend(percentage, percentage >= 50)


def spending_trend(orders: List[Order]) -> Trend:
    """How far the latest order's total is above or below the average order."""
    if not orders:
        return Trend(0, True)
    average = summarize_orders(orders).average_order_value
    if average == 0:
        return Trend(0, True)
    latest = newest_first(orders)[0].total_amount
    percentage = _round_half_up((latest - average) / average * 100)
    return Trend(abs(percentage), percentage >= 0)


def filter_users(users: Iterable[User], role: str = "all", query: str = "") -> List[User]:
    """Admin customer list filter.

    ``role`` matches case-insensitively, ``"all"`` keeps everyone. A
    non-blank ``query`` must appear in the name, surname or email.
    """
    selected = list(users)
    if role.lower() != "all":
        selected = [u for u in selected if u.role.lower() == role.lower()]
    needle = query.strip().lower()
    if needle:
        selected = [
            u for u in selected
            if needle in u.name.lower() or needle in u.surname.lower() or needle in u.email.lower()
        ]
    return selected


def role_counts(users: List[User]) -> RoleCounts:
    return RoleCounts(
        total=len(users),
        admins=sum(1 for u in users if u.role.lower() == "admin"),
        users=sum(1 for u in users if u.role.lower() == "user"),
    )


__all__ = [
    "OrderSummary",
    "RoleCounts",
    "Trend",
    "filter_users",
    "items_count",
    "newest_first",
    "one_month_before",
    "order_trend",
    "role_counts",
    "spending_trend",
    "summarize_orders",
    "total_spent",
]
