"""Base class for upload progress observers."""

from abc import ABC, abstractmethod

from ..domain.models import ProgressEvent


class ProgressReporter(ABC):
    """Abstract base class for progress reporting.

    Reporters are callables, so an instance can be passed anywhere an
    ``on_progress`` callback is expected.
    """

    @abstractmethod
    def report(self, event: ProgressEvent) -> None:
        """Handle a single progress event.

        Args:
            event: Waypoint or failure event emitted by the pipeline
        """
        pass

    def __call__(self, event: ProgressEvent) -> None:
        self.report(event)
