"""Cart commands."""
from __future__ import annotations

import click

from ...models.errors import StorefrontError
from ..console import console, print_cart, run_with_storefront


@click.group(invoke_without_command=True)
@click.pass_context
def cart(ctx):
    """Show or edit the cart."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(show)


@cart.command()
@click.pass_context
def show(ctx):
    """Show the cart contents."""

    async def _show(storefront):
        return storefront.cart.snapshot()

    print_cart(run_with_storefront(ctx, _show))


@cart.command()
@click.argument("product_id", type=int)
@click.pass_context
def add(ctx, product_id: int):
    """Add one unit of a product."""

    async def _add(storefront):
        product = await storefront.client.products.get(product_id)
        before = storefront.cart.snapshot().line(product_id)
        storefront.cart.add_item(product)
        after = storefront.cart.snapshot().line(product_id)
        return product, before, after

    try:
        product, before, after = run_with_storefront(ctx, _add)
    except StorefrontError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)

    if after is None:
        console.print(f"[yellow]{product.name} is out of stock[/yellow]")
    elif before is not None and before.quantity == after.quantity:
        console.print(f"[yellow]Only {after.stock_at_add} of {product.name} available[/yellow]")
    else:
        console.print(f"[green]✓ {product.name} x{after.quantity} in cart[/green]")


@cart.command()
@click.argument("product_id", type=int)
@click.pass_context
def remove(ctx, product_id: int):
    """Remove a product from the cart."""

    async def _remove(storefront):
        storefront.cart.remove_item(product_id)
        return storefront.cart.snapshot()

    print_cart(run_with_storefront(ctx, _remove))


@cart.command("set")
@click.argument("product_id", type=int)
@click.argument("quantity", type=int)
@click.pass_context
def set_quantity(ctx, product_id: int, quantity: int):
    """Set the quantity of a product already in the cart (0 removes it)."""

    async def _set(storefront):
        storefront.cart.set_quantity(product_id, quantity)
        return storefront.cart.snapshot()

    snapshot = run_with_storefront(ctx, _set)
    line = snapshot.line(product_id)
    if line is not None and line.quantity != quantity:
        console.print(f"[yellow]Only {line.stock_at_add} available; quantity unchanged[/yellow]")
    print_cart(snapshot)


@cart.command()
@click.pass_context
def clear(ctx):
    """Empty the cart."""

    async def _clear(storefront):
        storefront.cart.clear()

    run_with_storefront(ctx, _clear)
    console.print("[green]✓ Cart cleared[/green]")
