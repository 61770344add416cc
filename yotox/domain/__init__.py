"""Domain layer for yotox - data models, enums and exit codes."""

from .enums import PipelineState, UploadStage
from .exit_codes import ExitCode
from .models import (
    AudioFile,
    ProgressEvent,
    TranscodeInfo,
    TranscodeMetadata,
    TranscodeResult,
    UploadRequest,
    UploadTarget,
)

__all__ = [
    # Enums
    "UploadStage",
    "PipelineState",
    "ExitCode",
    # Models
    "AudioFile",
    "UploadRequest",
    "UploadTarget",
    "TranscodeMetadata",
    "TranscodeInfo",
    "TranscodeResult",
    "ProgressEvent",
]
