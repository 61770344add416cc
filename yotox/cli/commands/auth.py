"""Login and logout commands."""

import click

from yotox.auth import is_token_expired
from yotox.cli.common import console, token_manager


@click.command("login")
@click.option("--access-token", required=True, help="OAuth access token (JWT)")
@click.option("--refresh-token", default=None, help="OAuth refresh token")
def login_cmd(access_token: str, refresh_token: str) -> None:
    """Store tokens obtained from the Yoto login flow."""
    manager = token_manager()
    manager.store.save(access_token, refresh_token)
    if is_token_expired(access_token):
        console.print("[yellow]Access token is already expired; it will be refreshed on next use.[/yellow]")
    console.print(f"[green]Tokens saved to {manager.store.token_file}[/green]")


@click.command("logout")
def logout_cmd() -> None:
    """Forget stored tokens."""
    token_manager().store.clear()
    console.print("[green]Logged out[/green]")
