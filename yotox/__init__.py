"""yotox - Yoto card audio uploader.

Python client for replacing the audio on a Yoto card:
- Request a one-time upload URL and upload the audio
- Wait for server-side transcoding
- Rewrite the card to a single chapter pointing at the transcoded audio
- List the user's cards

Quick Start:
    >>> from yotox import AudioFile, UploadRequest, upload_to_card
    >>> request = UploadRequest(
    ...     audio_file=AudioFile.from_path("story.mp3"),
    ...     title="Bedtime story",
    ...     card_id="abc12",
    ...     access_token=token,
    ... )
    >>> card = upload_to_card(request, on_progress=print)
"""

__version__ = "0.1.0"

from yotox.api import (
    BinaryUploader,
    CardRepository,
    TranscodePoller,
    UploadInitiator,
    YotoTransport,
)
from yotox.auth import TokenManager, TokenStore
from yotox.config import YotoxConfig, get_config
from yotox.core import UploadOrchestrator, mutate_card, upload_to_card
from yotox.domain import (
    AudioFile,
    PipelineState,
    ProgressEvent,
    TranscodeResult,
    UploadRequest,
    UploadStage,
    UploadTarget,
)
from yotox.errors import (
    AuthRequiredError,
    CardFetchError,
    CardListError,
    CardSaveError,
    TokenRefreshError,
    TranscodeTimeoutError,
    UploadCancelledError,
    UploadError,
    UploadTargetError,
    UploadTransportError,
    YotoxError,
)

__all__ = [
    "__version__",
    # Configuration
    "YotoxConfig",
    "get_config",
    # Pipeline
    "UploadOrchestrator",
    "upload_to_card",
    "mutate_card",
    # API clients
    "YotoTransport",
    "CardRepository",
    "UploadInitiator",
    "BinaryUploader",
    "TranscodePoller",
    # Auth
    "TokenManager",
    "TokenStore",
    # Models
    "AudioFile",
    "UploadRequest",
    "UploadTarget",
    "TranscodeResult",
    "ProgressEvent",
    "UploadStage",
    "PipelineState",
    # Errors
    "YotoxError",
    "AuthRequiredError",
    "TokenRefreshError",
    "CardListError",
    "UploadError",
    "UploadTargetError",
    "UploadTransportError",
    "TranscodeTimeoutError",
    "CardFetchError",
    "CardSaveError",
    "UploadCancelledError",
]
