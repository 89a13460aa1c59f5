"""Catalog commands."""
from __future__ import annotations

import click
from rich.table import Table

from ...models.errors import StorefrontError
from ..console import console, format_price, run_with_storefront


def _products_table(items, title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Stock", justify="right")
    for p in items:
        stock = str(p.stock) if p.stock > 0 else "[red]out of stock[/red]"
        table.add_row(str(p.id), p.name, p.category, format_price(p.price), stock)
    return table


@click.group()
def products():
    """Browse the catalog."""
    pass


@products.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include hidden products (admin)")
@click.option("--category", help="Only this category")
@click.pass_context
def list_products(ctx, show_all: bool, category: str | None):
    """List products."""

    async def _list(storefront):
        if show_all:
            return await storefront.client.products.list_all()
        return await storefront.client.products.list_visible()

    try:
        items = run_with_storefront(ctx, _list)
    except StorefrontError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)

    if category:
        items = [p for p in items if p.category.lower() == category.lower()]
    if not items:
        console.print("[yellow]No products found[/yellow]")
        return
    console.print(_products_table(items, "Products"))


@products.command()
@click.argument("query")
@click.pass_context
def search(ctx, query: str):
    """Show suggestions for a search phrase."""

    async def _search(storefront):
        found = []

        def _collect(_, results):
            found[:] = results

        search = storefront.suggestion_search(on_results=_collect)
        search.update(query)
        await search.settle()
        return found

    try:
        items = run_with_storefront(ctx, _search)
    except StorefrontError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)
    if not items:
        console.print(f"[yellow]No products match {query!r}[/yellow]")
        return
    console.print(_products_table(items, f"Results for {query!r}"))


@products.command()
@click.argument("product_id", type=int)
@click.pass_context
def show(ctx, product_id: int):
    """Show one product."""

    async def _show(storefront):
        return await storefront.client.products.get(product_id)

    try:
        product = run_with_storefront(ctx, _show)
    except StorefrontError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)

    console.print(f"\n[bold]{product.name}[/bold]")
    console.print(f"  ID: {product.id}")
    console.print(f"  Category: {product.category or 'N/A'}")
    console.print(f"  Price: {format_price(product.price)}")
    console.print(f"  Stock: {product.stock}")
    if product.description:
        console.print(f"\n{product.description}")
