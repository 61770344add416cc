"""Replace a card's audio with a local file."""

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import click

from yotox.cli.common import console, fail, require_access_token
from yotox.config import get_config
from yotox.core.upload import upload_to_card
from yotox.domain.exit_codes import ExitCode
from yotox.domain.models import AudioFile, UploadRequest
from yotox.errors import UploadError
from yotox.progress import ConsoleProgressReporter


@click.command("upload")
@click.argument("card_id")
@click.argument(
    "audio_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--title", "-t", required=True, help="New title for the card")
@click.option("--content-type", default=None, help="Override the guessed media type")
@click.option("--verbose", "-v", is_flag=True, help="Show every polling update")
def upload_cmd(
    card_id: str,
    audio_path: Path,
    title: str,
    content_type: str,
    verbose: bool,
) -> None:
    """Upload AUDIO_PATH and make it the only track on CARD_ID."""
    config = get_config()
    access_token = require_access_token()

    request = UploadRequest(
        audio_file=AudioFile.from_path(audio_path, content_type=content_type),
        title=title,
        card_id=card_id,
        access_token=access_token,
        api_base_url=config.api_base_url,
    )
    cancel_event = threading.Event()

    # The pipeline runs on a worker so Ctrl-C reaches this thread while it is
    # still in flight; the worker stops at its next stage boundary or poll.
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(
            upload_to_card,
            request,
            on_progress=ConsoleProgressReporter(console=console, verbose=verbose),
            cancel_event=cancel_event,
            max_attempts=config.transcode_max_attempts,
            poll_interval=config.transcode_poll_interval,
            timeout=config.http_timeout,
        )
        try:
            card = future.result()
        except KeyboardInterrupt:
            cancel_event.set()
            fail("Upload interrupted", ExitCode.INTERRUPTED)
        except UploadError as e:
            fail(str(e), ExitCode.PROCESSING_ERROR)

    saved = card.get("card") if isinstance(card.get("card"), dict) else card
    click.echo(f"Updated card {card_id}: {saved.get('title', title)}")
