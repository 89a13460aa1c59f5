"""Interactive checkout."""
from __future__ import annotations

import click

from ...checkout import CheckoutOrchestrator
from ...models.address import AddressForm
from ...models.checkout import DeliveryMethod, PaymentMethod
from ...models.errors import (
    CheckoutError,
    InventoryValidationError,
    StorefrontError,
    ValidationError,
)
from ..console import console, format_price, print_cart, run_with_storefront


def _print_summary(flow: CheckoutOrchestrator) -> None:
    draft = flow.draft
    console.print(f"  Subtotal: {format_price(draft.subtotal)}")
    if DeliveryMethod(draft.delivery_method) is DeliveryMethod.DELIVERY:
        console.print(f"  Shipping: {format_price(draft.shipping)}")
        if draft.selected_address is not None:
            console.print(f"  Ship to: {draft.selected_address.one_line()}")
    else:
        console.print("  Pickup in store")
    if draft.payment_method is not None:
        console.print(f"  Payment: {draft.payment_method_name()}")
    console.print(f"  Total: [bold]{format_price(draft.total)}[/bold]")


def _prompt_address_form() -> AddressForm:
    return AddressForm(
        label=click.prompt("Label", default="Home"),
        street=click.prompt("Street"),
        city=click.prompt("City"),
        postal_code=click.prompt("Postal code"),
        country=click.prompt("Country"),
        phone_area_code=click.prompt("Phone area code"),
        phone_number=click.prompt("Phone number"),
        is_default=click.confirm("Make this the default address?", default=False),
    )


async def _choose_address(flow: CheckoutOrchestrator) -> None:
    while True:
        for address in flow.addresses:
            marker = "*" if flow.draft.selected_address and flow.draft.selected_address.id == address.id else " "
            console.print(f" {marker} [{address.id}] {address.one_line()}")
        if not flow.addresses:
            console.print("[yellow]No saved addresses[/yellow]")
        choice = click.prompt("Address id, 'n' for a new one, or Enter to keep", default="", show_default=False)
        if not choice:
            if flow.draft.selected_address is not None:
                return
            continue
        if choice.lower() == "n":
            try:
                await flow.create_address(_prompt_address_form())
            except ValidationError as e:
                console.print(f"[red]{e.message}[/red]")
            except StorefrontError:
                pass
            continue
        try:
            flow.select_address(int(choice))
            return
        except (ValueError, CheckoutError):
            console.print(f"[red]Unknown address {choice}[/red]")


def _choose_payment(flow: CheckoutOrchestrator) -> None:
    methods = list(PaymentMethod)
    for method in methods:
        console.print(f"  [{int(method)}] {method.display_name}")
    choice = click.prompt("Payment method", type=click.Choice([str(int(m)) for m in methods]))
    flow.select_payment_method(PaymentMethod(int(choice)))


@click.command()
@click.pass_context
def checkout(ctx):
    """Check out the cart step by step."""

    async def _checkout(storefront):
        flow = storefront.checkout()
        try:
            await flow.start()
        except CheckoutError as e:
            console.print(f"[red]{e.message}[/red]")
            return None

        print_cart(storefront.cart.snapshot())
        pickup = click.confirm("Pick up in store instead of delivery?", default=False)
        flow.set_delivery_method(DeliveryMethod.PICKUP if pickup else DeliveryMethod.DELIVERY)
        if not pickup:
            await _choose_address(flow)
        flow.proceed_to_payment()

        _choose_payment(flow)
        flow.set_notes(click.prompt("Notes", default="", show_default=False))

        while True:
            _print_summary(flow)
            if not click.confirm("Place the order?", default=True):
                flow.abandon(discard_draft=True)
                console.print("[yellow]Checkout cancelled; your cart is unchanged[/yellow]")
                return None
            try:
                return await flow.confirm()
            except InventoryValidationError:
                if not flow.draft.cart_lines:
                    flow.abandon(discard_draft=True)
                    return None
                print_cart(storefront.cart.snapshot())
            except StorefrontError:
                if not click.confirm("Try again?", default=True):
                    flow.abandon(discard_draft=True)
                    return None

    response = run_with_storefront(ctx, _checkout)
    if response is None:
        raise SystemExit(1)
