"""
Storefront CLI main entry point.

Usage:
    storefront [OPTIONS] COMMAND [ARGS]...
"""
from __future__ import annotations

import logging

import click

from .. import __version__
from ..config import StorefrontSettings
from .commands import admin, auth, cart, checkout, orders, products


@click.group()
@click.version_option(version=__version__, message="%(prog)s %(version)s")
@click.option("--api-url", envvar="STOREFRONT_API_BASE_URL", help="API base URL")
@click.option(
    "--storage",
    "storage_path",
    envvar="STOREFRONT_STORAGE_PATH",
    type=click.Path(dir_okay=False),
    help="File holding the credential and cart",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, api_url: str | None, storage_path: str | None, verbose: bool):
    """Storefront CLI - browse, fill a cart and check out."""
    ctx.ensure_object(dict)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    overrides = {}
    if api_url:
        overrides["api_base_url"] = api_url
    if storage_path:
        overrides["storage_path"] = storage_path
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = StorefrontSettings(**overrides)
    ctx.obj["verbose"] = verbose


cli.add_command(auth.login)
cli.add_command(auth.logout)
cli.add_command(auth.whoami)
cli.add_command(auth.register)
cli.add_command(products.products)
cli.add_command(cart.cart)
cli.add_command(orders.orders)
cli.add_command(checkout.checkout)
cli.add_command(admin.admin)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
