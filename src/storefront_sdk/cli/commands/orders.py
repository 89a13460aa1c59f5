"""Order history command."""
from __future__ import annotations

import click
from rich.table import Table

from ...analytics import items_count, newest_first, order_trend, spending_trend, summarize_orders
from ...models.errors import StorefrontError
from ..console import console, format_price, run_with_storefront


@click.command()
@click.pass_context
def orders(ctx):
    """List your past orders."""

    async def _orders(storefront):
        identity = storefront.session.current_identity()
        if identity is None:
            return None
        return await storefront.client.orders.list_by_user(identity.id)

    try:
        items = run_with_storefront(ctx, _orders)
    except StorefrontError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)

    if items is None:
        console.print("[yellow]Not signed in[/yellow]")
        raise SystemExit(1)
    if not items:
        console.print("[yellow]No orders yet[/yellow]")
        return

    table = Table(title="Orders")
    table.add_column("ID", style="cyan")
    table.add_column("Placed")
    table.add_column("Status")
    table.add_column("Items", justify="right")
    table.add_column("Total", justify="right", style="green")
    for order in newest_first(items):
        placed = order.created_at.strftime("%Y-%m-%d %H:%M") if order.created_at else "N/A"
        table.add_row(
            str(order.id),
            placed,
            order.status or "N/A",
            str(items_count(order)),
            format_price(order.total_amount),
        )
    console.print(table)

    summary = summarize_orders(items)
    console.print(f"  Orders: {summary.total_orders} ({summary.completed_orders} completed)")
    console.print(f"  Total spent: [bold]{format_price(summary.total_spent)}[/bold]")
    console.print(f"  Average order: {format_price(summary.average_order_value)}")
    console.print(f"  Orders in the last month: {order_trend(items).describe()}")
    console.print(f"  Latest order vs average: {spending_trend(items).describe()}")
