"""Media upload and transcode endpoints.

Handles the first half of a card upload:
1. Request a one-time upload URL
2. PUT the audio bytes to it
3. Poll until the server has transcoded the audio
"""

import threading
import time
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from ..domain.enums import UploadStage
from ..domain.models import AudioFile, ProgressEvent, TranscodeResult, UploadTarget
from ..errors import (
    TranscodeTimeoutError,
    UploadCancelledError,
    UploadTargetError,
    UploadTransportError,
)
from ..logging import get_logger
from .transport import YotoTransport

logger = get_logger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]

UPLOAD_URL_PATH = "/media/transcode/audio/uploadUrl"
TRANSCODE_STATUS_PATH = "/media/upload/{upload_id}/transcoded"

# Polling progress is interpolated between these waypoints
TRANSCODE_PROGRESS_START = 50.0
TRANSCODE_PROGRESS_END = 75.0


class UploadInitiator:
    """Acquires a one-time upload target from the API."""

    def __init__(self, transport: YotoTransport):
        self.transport = transport

    def request_upload_target(self) -> UploadTarget:
        """Ask the API for a fresh upload URL and correlation id.

        Returns:
            UploadTarget with the pre-signed URL and upload id

        Raises:
            UploadTargetError: If the response carries no usable upload URL
        """
        try:
            response = self.transport.get(UPLOAD_URL_PATH)
        except httpx.RequestError as e:
            raise UploadTargetError(f"Network error requesting upload URL: {e}") from e

        if response.status_code >= 400:
            raise UploadTargetError(
                f"Failed to get upload URL: API error {response.status_code}: {response.text}"
            )

        try:
            upload = response.json().get("upload") or {}
        except (ValueError, AttributeError) as e:
            raise UploadTargetError("Failed to get upload URL: invalid response body") from e

        if not isinstance(upload, dict):
            raise UploadTargetError("Failed to get upload URL")
        upload_url = upload.get("uploadUrl")
        upload_id = upload.get("uploadId")
        if not upload_url or not upload_id:
            raise UploadTargetError("Failed to get upload URL")

        logger.info("Upload target acquired", upload_id=upload_id)
        return UploadTarget(upload_url=upload_url, upload_id=upload_id)


class BinaryUploader:
    """Streams raw audio bytes to a pre-signed upload URL."""

    def __init__(self, transport: YotoTransport):
        self.transport = transport

    def put_audio(self, upload_url: str, audio_file: AudioFile) -> None:
        """Upload the audio with its declared media type.

        Raises:
            UploadTransportError: On a network error or a non-success status
        """
        logger.info(
            "Uploading audio",
            file_name=audio_file.name,
            content_type=audio_file.content_type,
            size_mb=round(audio_file.size / (1024 * 1024), 2),
        )
        try:
            response = self.transport.put_unauthenticated(
                upload_url, content=audio_file.data, content_type=audio_file.content_type
            )
        except httpx.RequestError as e:
            raise UploadTransportError(f"Network error uploading audio: {e}") from e

        if response.status_code >= 400:
            raise UploadTransportError(
                f"Audio upload rejected with HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        logger.info("Audio uploaded", status_code=response.status_code)


class TranscodePoller:
    """Bounded polling loop waiting for server-side transcoding.

    Attributes:
        max_attempts: Number of not-ready polls tolerated before giving up
        poll_interval: Fixed delay between polls in seconds
        attempts: Not-ready polls seen in the current wait
    """

    def __init__(
        self,
        transport: YotoTransport,
        max_attempts: int = 30,
        poll_interval: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.transport = transport
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.attempts = 0

    def progress_for(self, attempts: int) -> float:
        span = TRANSCODE_PROGRESS_END - TRANSCODE_PROGRESS_START
        return TRANSCODE_PROGRESS_START + (attempts / self.max_attempts) * span

    def check_status(self, upload_id: str) -> Optional[TranscodeResult]:
        """Poll the transcode status once.

        Returns:
            TranscodeResult when ready, None while still transcoding or when
            the poll itself failed
        """
        try:
            response = self.transport.get(
                TRANSCODE_STATUS_PATH.format(upload_id=upload_id),
                params={"loudnorm": "false"},
            )
        except httpx.RequestError as e:
            logger.warning("Transcode status check failed", upload_id=upload_id, error=str(e))
            return None

        if response.status_code >= 400:
            logger.debug(
                "Transcode status not available",
                upload_id=upload_id,
                status_code=response.status_code,
            )
            return None

        try:
            transcode = response.json().get("transcode") or {}
        except (ValueError, AttributeError):
            logger.warning("Unreadable transcode status", upload_id=upload_id)
            return None

        if not isinstance(transcode, dict) or not transcode.get("transcodedSha256"):
            return None

        try:
            return TranscodeResult.model_validate(transcode)
        except ValidationError as e:
            logger.warning("Malformed transcode result", upload_id=upload_id, error=str(e))
            return None

    def wait_for_transcode(
        self,
        upload_id: str,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> TranscodeResult:
        """Poll until the transcode is ready or the attempt budget runs out.

        Args:
            upload_id: Correlation id from the upload target
            on_progress: Receives one transcoding event per not-ready poll
            cancel_event: Set to abort before the next poll

        Returns:
            The finished TranscodeResult

        Raises:
            TranscodeTimeoutError: After max_attempts not-ready polls
            UploadCancelledError: If cancel_event is set
        """
        self.attempts = 0

        while self.attempts < self.max_attempts:
            if cancel_event is not None and cancel_event.is_set():
                raise UploadCancelledError("Upload cancelled while transcoding")

            result = self.check_status(upload_id)
            if result is not None:
                logger.info(
                    "Transcode complete",
                    upload_id=upload_id,
                    sha256=result.transcoded_sha256,
                    attempts=self.attempts,
                )
                return result

            self.sleep(self.poll_interval)
            self.attempts += 1
            logger.debug("Transcode not ready", upload_id=upload_id, attempt=self.attempts)
            if on_progress is not None:
                on_progress(
                    ProgressEvent(
                        stage=UploadStage.TRANSCODING,
                        progress=self.progress_for(self.attempts),
                    )
                )

        raise TranscodeTimeoutError(upload_id, self.attempts, self.poll_interval)
