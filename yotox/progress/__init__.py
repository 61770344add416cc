"""Progress reporting for the upload pipeline.

Usage:
    from yotox.progress import ConsoleProgressReporter, SilentProgressReporter

    # For CLI
    orchestrator.upload(request, on_progress=ConsoleProgressReporter())

    # For testing
    progress = SilentProgressReporter(track_events=True)
    orchestrator.upload(request, on_progress=progress)
    assert progress.progress_values[-1] == 100
"""

from ..domain.models import ProgressEvent
from .base import ProgressReporter
from .console import ConsoleProgressReporter
from .silent import SilentProgressReporter

__all__ = [
    "ProgressEvent",
    "ProgressReporter",
    "ConsoleProgressReporter",
    "SilentProgressReporter",
]
