"""List the user's cards."""

import click
from rich.console import Console
from rich.table import Table

from yotox.api import CardRepository, YotoTransport
from yotox.cli.common import fail, require_access_token
from yotox.config import get_config
from yotox.domain.exit_codes import ExitCode
from yotox.errors import CardListError


@click.command("cards")
@click.option("--workers", default=8, show_default=True, help="Concurrent detail requests")
def cards_cmd(workers: int) -> None:
    """List your cards with their current titles."""
    config = get_config()
    access_token = require_access_token()

    with YotoTransport(access_token, config.api_base_url, config.http_timeout) as transport:
        try:
            cards = CardRepository(transport).list_cards(max_workers=workers)
        except CardListError as e:
            fail(str(e), ExitCode.SYSTEM_ERROR)

    if not cards:
        click.echo("No cards found")
        return

    table = Table(title="Your cards")
    table.add_column("Card ID", style="cyan")
    table.add_column("Title")
    for card in cards:
        table.add_row(str(card.get("cardId", "")), str(card.get("title", "")))
    Console().print(table)
