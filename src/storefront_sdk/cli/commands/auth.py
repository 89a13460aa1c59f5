"""Authentication commands."""
from __future__ import annotations

import click

from ...models.errors import ValidationError
from ...models.user import RegistrationForm, password_strength
from ..console import console, run_with_storefront


@click.command()
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
@click.pass_context
def login(ctx, email: str, password: str):
    """Sign in and keep the credential for later commands."""

    async def _login(storefront):
        ok = await storefront.session.login(email, password)
        return ok, storefront.session.current_identity()

    ok, identity = run_with_storefront(ctx, _login)
    if not ok:
        console.print("[red]Invalid email or password[/red]")
        raise SystemExit(1)
    name = f"{identity.name} {identity.surname}".strip() if identity else email
    console.print(f"[green]✓ Signed in as {name}[/green]")


@click.command()
@click.pass_context
def logout(ctx):
    """Forget the stored credential."""

    async def _logout(storefront):
        storefront.session.logout()

    run_with_storefront(ctx, _logout)
    console.print("[green]✓ Signed out[/green]")


@click.command()
@click.pass_context
def whoami(ctx):
    """Show who the stored credential belongs to."""

    async def _whoami(storefront):
        return storefront.session.current_identity()

    identity = run_with_storefront(ctx, _whoami)
    if identity is None:
        console.print("[yellow]Not signed in[/yellow]")
        console.print("  Run 'storefront login' to sign in")
        return
    console.print("\n[bold]User Information[/bold]")
    console.print(f"  ID: {identity.id}")
    console.print(f"  Name: {identity.name} {identity.surname}".rstrip())
    console.print(f"  Email: {identity.email}")
    console.print(f"  Role: {identity.role}")


@click.command()
@click.option("--first-name", prompt=True)
@click.option("--last-name", prompt=True)
@click.option("--email", prompt=True)
@click.option("--phone-number", default="", help="Optional phone number")
@click.option("--date-of-birth", default="", help="Optional, YYYY-MM-DD")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--agree-to-terms", is_flag=True, help="Accept the Terms of Service and Privacy Policy")
@click.pass_context
def register(ctx, first_name, last_name, email, phone_number, date_of_birth, password, agree_to_terms):
    """Create a new account."""
    form = RegistrationForm(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone_number=phone_number,
        date_of_birth=date_of_birth,
        password=password,
        confirm_password=password,
        agree_to_terms=agree_to_terms,
    )
    strength = password_strength(password)
    if strength:
        console.print(f"  Password strength: {strength}")

    async def _register(storefront):
        return await storefront.session.register(form)

    try:
        ok = run_with_storefront(ctx, _register)
    except ValidationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise SystemExit(1)
    if not ok:
        console.print("[red]Registration failed[/red]")
        raise SystemExit(1)
    console.print("[green]✓ Account created. Run 'storefront login' to sign in.[/green]")
