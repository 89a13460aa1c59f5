"""Admin commands: users and categories."""
from __future__ import annotations

import click
from rich.table import Table

from ...analytics import filter_users, role_counts
from ...models.errors import StorefrontError
from ..console import console, run_with_storefront


def _run(ctx, action):
    try:
        return run_with_storefront(ctx, action)
    except StorefrontError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)


@click.group()
def admin():
    """Shop administration (requires an admin account)."""
    pass


@admin.command()
@click.option("--role", default="all", help="Only this role (admin, user or all)")
@click.option("--search", default="", help="Match against name, surname or email")
@click.pass_context
def users(ctx, role: str, search: str):
    """List registered users."""

    async def _users(storefront):
        everyone = await storefront.client.users.list_all()
        found = filter_users(everyone, role=role, query=search)
        joined = {u.id: await storefront.client.users.join_date(u.id) for u in found}
        return everyone, found, joined

    everyone, found, joined = _run(ctx, _users)
    counts = role_counts(everyone)
    console.print(f"  Users: {counts.total}  Admins: {counts.admins}  Customers: {counts.users}")
    if not found:
        console.print("[yellow]No users match[/yellow]")
        return
    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Role")
    table.add_column("Joined")
    for user in found:
        table.add_row(
            str(user.id),
            f"{user.name} {user.surname}".strip(),
            user.email,
            user.role,
            joined[user.id].strftime("%Y-%m-%d"),
        )
    console.print(table)


@admin.group()
def categories():
    """Manage product categories."""
    pass


@categories.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories."""

    async def _list(storefront):
        return await storefront.client.categories.list()

    found = _run(ctx, _list)
    table = Table(title="Categories")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Active")
    for category in found:
        table.add_row(str(category.id), category.name, "yes" if category.is_active else "no")
    console.print(table)


@categories.command("create")
@click.argument("name")
@click.pass_context
def create_category(ctx, name: str):
    """Create a category."""

    async def _create(storefront):
        return await storefront.client.categories.create(name)

    _run(ctx, _create)
    console.print(f"[green]✓ Category {name!r} created[/green]")


@categories.command()
@click.argument("category_id", type=int)
@click.option("--off", is_flag=True, help="Deactivate instead")
@click.pass_context
def activate(ctx, category_id: int, off: bool):
    """Activate (or with --off deactivate) a category."""

    async def _toggle(storefront):
        if off:
            return await storefront.client.categories.deactivate(category_id)
        return await storefront.client.categories.activate(category_id)

    if not _run(ctx, _toggle):
        console.print("[red]Category was not updated[/red]")
        raise SystemExit(1)
    console.print(f"[green]✓ Category {category_id} {'deactivated' if off else 'activated'}[/green]")


@admin.command("delete-product")
@click.argument("product_id", type=int)
@click.confirmation_option(prompt="Delete this product?")
@click.pass_context
def delete_product(ctx, product_id: int):
    """Delete a product."""

    async def _delete(storefront):
        return await storefront.client.products.delete(product_id)

    if not _run(ctx, _delete):
        console.print("[red]Product was not deleted[/red]")
        raise SystemExit(1)
    console.print(f"[green]✓ Product {product_id} deleted[/green]")
