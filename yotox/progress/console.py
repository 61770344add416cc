"""Console-based progress reporter for CLI applications."""

import sys
from typing import Optional

from rich.console import Console

from ..domain.enums import UploadStage
from ..domain.models import ProgressEvent
from .base import ProgressReporter

_STAGE_LABELS = {
    UploadStage.UPLOADING: "Uploading audio",
    UploadStage.TRANSCODING: "Transcoding",
    UploadStage.UPDATING_CARD: "Updating card",
    UploadStage.COMPLETE: "Card updated",
}


class ConsoleProgressReporter(ProgressReporter):
    """Progress reporter that prints waypoints using Rich.

    Polling emits many transcoding events; unless verbose, only the first
    one per stage is printed.
    """

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console(file=sys.stderr)
        self.verbose = verbose
        self._last_stage: Optional[UploadStage] = None

    def report(self, event: ProgressEvent) -> None:
        label = _STAGE_LABELS.get(event.stage, event.stage.value)
        percentage = int(event.progress)

        if event.failed:
            self.console.print(
                f"[bold red]✗[/bold red] {label} failed at {percentage}%: {event.error}",
                style="bold red",
            )
            return

        if event.stage == UploadStage.COMPLETE:
            self.console.print(f"[bold green]✓[/bold green] {label} ({percentage}%)")
        elif self.verbose or event.stage != self._last_stage:
            self.console.print(f"  [{percentage}%] {label}")

        self._last_stage = event.stage
