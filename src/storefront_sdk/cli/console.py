"""Console rendering shared by CLI commands."""
from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Awaitable, Callable, TypeVar

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..app import Storefront
from ..client import StorefrontClient
from ..config import StorefrontSettings
from ..modals import ModalHandle, ModalKind
from ..models.cart import CartSnapshot

console = Console()

T = TypeVar("T")


def format_price(amount: Decimal) -> str:
    return f"${Decimal(amount):.2f}"


class ConsoleNavigator:
    def __init__(self) -> None:
        self.current = "/"

    def navigate(self, route: str) -> None:
        self.current = route
        console.print(f"[dim]→ {route}[/dim]")


class ConsoleNotifier:
    def info(self, message: str) -> None:
        console.print(f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        console.print(f"[red]{message}[/red]")


def _render_modal(handle: ModalHandle) -> None:
    if handle.kind is ModalKind.SESSION_EXPIRED:
        console.print(Panel(handle.message, title="Session expired", style="yellow"))
    else:
        console.print(Panel(handle.message, title="Not authorized", style="red"))
    # a terminal has nothing to keep blocked, so the prompt's action runs right away
    if handle.kind is ModalKind.SESSION_EXPIRED:
        handle.confirm()
    else:
        handle.dismiss()


def build_storefront(ctx: click.Context) -> Storefront:
    settings: StorefrontSettings = ctx.obj["settings"]
    client = StorefrontClient(settings=settings, transport=ctx.obj.get("transport"))
    storefront = Storefront(
        client=client,
        navigator=ConsoleNavigator(),
        notifier=ConsoleNotifier(),
    )
    storefront.modals.on_show(_render_modal)
    return storefront


def run_with_storefront(ctx: click.Context, action: Callable[[Storefront], Awaitable[T]]) -> T:
    """Build a storefront, run one async action against it and close it."""

    async def _main() -> T:
        async with build_storefront(ctx) as storefront:
            return await action(storefront)

    return asyncio.run(_main())


def cart_table(snapshot: CartSnapshot) -> Table:
    table = Table(title="Cart")
    table.add_column("ID", style="cyan")
    table.add_column("Product")
    table.add_column("Price", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column("In stock", justify="right", style="dim")
    table.add_column("Total", justify="right", style="green")
    for line in snapshot.lines:
        table.add_row(
            str(line.product_id),
            line.display_name,
            format_price(line.unit_price),
            str(line.quantity),
            str(line.stock_at_add),
            format_price(line.line_total),
        )
    return table


def print_cart(snapshot: CartSnapshot) -> None:
    if snapshot.is_empty:
        console.print("[yellow]Your cart is empty[/yellow]")
        return
    console.print(cart_table(snapshot))
    console.print(f"  Items: {snapshot.count}")
    console.print(f"  Subtotal: [bold]{format_price(snapshot.subtotal)}[/bold]")
