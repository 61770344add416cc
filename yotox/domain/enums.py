"""Enums for the yotox domain layer."""

from enum import Enum


class UploadStage(str, Enum):
    """Stages reported to progress observers.

    These names are part of the progress contract and must not change.
    """

    UPLOADING = "uploading"
    TRANSCODING = "transcoding"
    UPDATING_CARD = "updating_card"
    COMPLETE = "complete"


class PipelineState(str, Enum):
    """Internal states of the upload orchestrator."""

    IDLE = "idle"
    REQUESTING_TARGET = "requesting-target"
    UPLOADING = "uploading"
    TRANSCODING = "transcoding"
    FETCHING_CARD = "fetching-card"
    MUTATING = "mutating"
    SAVING = "saving"
    COMPLETE = "complete"
    FAILED = "failed"
