"""Card upload pipeline.

Replaces a card's audio in strictly sequential stages:

    requesting-target -> uploading -> transcoding -> fetching-card
    -> mutating -> saving -> complete

Any stage can move the pipeline to ``failed``. Progress observers receive
fixed waypoints (0, 50, 50-75 while polling, 85, 100); a failure is reported
once with the last stage and percentage plus the error message, and the
exception is re-raised to the caller. Media that was already uploaded is not
cleaned up when a later stage fails.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional

import httpx

from ..api.cards import CardRepository
from ..api.media import BinaryUploader, TranscodePoller, UploadInitiator
from ..api.transport import YotoTransport
from ..domain.enums import PipelineState, UploadStage
from ..domain.models import ProgressEvent, UploadRequest
from ..errors import UploadCancelledError
from ..logging import get_logger
from .card_mutator import mutate_card

logger = get_logger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


def _ignore_progress(event: ProgressEvent) -> None:
    pass


class UploadOrchestrator:
    """Coordinates the upload of one audio file onto one card.

    Attributes:
        state: Current PipelineState, ``failed`` after an error
    """

    def __init__(
        self,
        initiator: UploadInitiator,
        uploader: BinaryUploader,
        poller: TranscodePoller,
        repository: CardRepository,
    ):
        self.initiator = initiator
        self.uploader = uploader
        self.poller = poller
        self.repository = repository
        self.state = PipelineState.IDLE
        self._on_progress: ProgressCallback = _ignore_progress
        self._last_event = ProgressEvent(stage=UploadStage.UPLOADING, progress=0)

    @classmethod
    def from_transport(
        cls,
        transport: YotoTransport,
        max_attempts: int = 30,
        poll_interval: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "UploadOrchestrator":
        """Build an orchestrator whose collaborators share one transport."""
        return cls(
            initiator=UploadInitiator(transport),
            uploader=BinaryUploader(transport),
            poller=TranscodePoller(
                transport,
                max_attempts=max_attempts,
                poll_interval=poll_interval,
                sleep=sleep,
            ),
            repository=CardRepository(transport),
        )

    def _emit(self, stage: UploadStage, progress: float) -> None:
        event = ProgressEvent(stage=stage, progress=progress)
        self._last_event = event
        self._on_progress(event)

    def _enter(self, state: PipelineState, cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise UploadCancelledError(f"Upload cancelled before {state.value}")
        self.state = state
        logger.debug("Upload stage", state=state.value)

    def upload(
        self,
        request: UploadRequest,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, Any]:
        """Run the pipeline for ``request``.

        Args:
            request: Audio, target card and new title
            on_progress: Observer for progress events
            cancel_event: Set to abort at the next stage boundary or poll

        Returns:
            The card document as persisted by the API

        Raises:
            UploadError: Subclass naming the stage that failed
        """
        self._on_progress = on_progress or _ignore_progress
        self._last_event = ProgressEvent(stage=UploadStage.UPLOADING, progress=0)
        self.state = PipelineState.IDLE
        log = logger.bind(card_id=request.card_id, file_name=request.audio_file.name)

        try:
            self._enter(PipelineState.REQUESTING_TARGET, cancel_event)
            target = self.initiator.request_upload_target()

            self._enter(PipelineState.UPLOADING, cancel_event)
            self._emit(UploadStage.UPLOADING, 0)
            self.uploader.put_audio(target.upload_url, request.audio_file)

            self._enter(PipelineState.TRANSCODING, cancel_event)
            self._emit(UploadStage.TRANSCODING, 50)
            transcode = self.poller.wait_for_transcode(
                target.upload_id, on_progress=self._track, cancel_event=cancel_event
            )

            self._enter(PipelineState.FETCHING_CARD, cancel_event)
            self._emit(UploadStage.UPDATING_CARD, 85)
            existing_card = self.repository.fetch_card(request.card_id)

            self._enter(PipelineState.MUTATING, cancel_event)
            updated_card = mutate_card(existing_card, transcode, request.title)

            self._enter(PipelineState.SAVING, cancel_event)
            saved = self.repository.save_card(updated_card)
        except Exception as e:
            failed_in = self.state
            self.state = PipelineState.FAILED
            log.error("Upload failed", state=failed_in.value, error=str(e))
            self._on_progress(
                ProgressEvent(
                    stage=self._last_event.stage,
                    progress=self._last_event.progress,
                    error=str(e),
                )
            )
            raise

        self.state = PipelineState.COMPLETE
        self._emit(UploadStage.COMPLETE, 100)
        log.info("Card updated", upload_id=target.upload_id)
        return saved

    def _track(self, event: ProgressEvent) -> None:
        self._last_event = event
        self._on_progress(event)


def upload_to_card(
    request: UploadRequest,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
    max_attempts: int = 30,
    poll_interval: float = 0.5,
    timeout: float = 30.0,
    client: Optional[httpx.Client] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """Upload ``request.audio_file`` and point ``request.card_id`` at it.

    Convenience wrapper that builds a transport from the request's token and
    base URL, runs one UploadOrchestrator and closes the transport.
    """
    with YotoTransport(
        request.access_token,
        base_url=request.api_base_url,
        timeout=timeout,
        client=client,
    ) as transport:
        orchestrator = UploadOrchestrator.from_transport(
            transport, max_attempts=max_attempts, poll_interval=poll_interval, sleep=sleep
        )
        return orchestrator.upload(request, on_progress=on_progress, cancel_event=cancel_event)
