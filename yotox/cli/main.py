#!/usr/bin/env python3
"""yotox CLI - main entry point."""

import click

from yotox.cli.commands import cards_cmd, login_cmd, logout_cmd, upload_cmd
from yotox.logging import setup_logging


@click.group(context_settings={"max_content_width": 120})
def main() -> None:
    """yotox - replace the audio on your Yoto cards

    \b
    Commands:
      login    Store OAuth tokens
      logout   Forget stored tokens
      cards    List your cards
      upload   Upload audio to a card

    \b
    Usage:
      yotox cards
      yotox upload CARD_ID ./story.mp3 --title "Bedtime story"
    """
    setup_logging()


main.add_command(login_cmd, name="login")
main.add_command(logout_cmd, name="logout")
main.add_command(cards_cmd, name="cards")
main.add_command(upload_cmd, name="upload")


if __name__ == "__main__":
    main()
