"""Silent progress reporter for testing and background tasks."""

from typing import Optional

from ..domain.models import ProgressEvent
from .base import ProgressReporter


class SilentProgressReporter(ProgressReporter):
    """Progress reporter that outputs nothing.

    With ``track_events`` enabled it keeps every event, which tests use to
    assert on the waypoint sequence.
    """

    def __init__(self, track_events: bool = False):
        self.track_events = track_events
        self.events: list[ProgressEvent] = []

    def report(self, event: ProgressEvent) -> None:
        if self.track_events:
            self.events.append(event)

    @property
    def progress_values(self) -> list[float]:
        return [e.progress for e in self.events]

    def get_latest_event(self) -> Optional[ProgressEvent]:
        return self.events[-1] if self.events else None

    def reset(self) -> None:
        """Reset event tracking."""
        self.events = []
