"""Upload pipeline data models.

Request-side values are frozen dataclasses built by the caller. Payloads that
come back from the Yoto API are parsed with pydantic so camelCase wire names
map onto Python attributes.
"""

from __future__ import annotations

import mimetypes
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import UploadStage


@dataclass(frozen=True)
class AudioFile:
    """Raw audio to upload.

    Attributes:
        data: File contents
        content_type: Declared media type sent with the upload
        name: Original file name
    """

    data: bytes
    content_type: str
    name: str

    @classmethod
    def from_path(cls, path: Union[str, Path], content_type: Optional[str] = None) -> "AudioFile":
        path = Path(path)
        if content_type is None:
            content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            data=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
            name=path.name,
        )

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class UploadRequest:
    """Everything needed to replace a card's audio."""

    audio_file: AudioFile
    title: str
    card_id: str
    access_token: str
    api_base_url: str = "https://api.yotoplay.com"


@dataclass(frozen=True)
class UploadTarget:
    """One-time upload destination handed out by the API.

    Attributes:
        upload_url: Pre-signed, time-limited URL for the audio bytes
        upload_id: Server correlation id used to poll the transcode job
    """

    upload_url: str
    upload_id: str


class TranscodeMetadata(BaseModel):
    """Tags the transcoder read from the uploaded file."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None


class TranscodeInfo(BaseModel):
    """Media facts about the transcoded audio."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    duration: Optional[float] = None
    file_size: Optional[int] = Field(None, alias="fileSize")
    channels: Optional[Any] = None
    format: Optional[str] = None
    metadata: TranscodeMetadata = Field(default_factory=TranscodeMetadata)

    @field_validator("metadata", mode="before")
    @classmethod
    def null_metadata_as_empty(cls, v: Any) -> Any:
        return {} if v is None else v


class TranscodeResult(BaseModel):
    """A finished transcode job, addressed by content hash."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    transcoded_sha256: str = Field(..., alias="transcodedSha256")
    transcoded_info: TranscodeInfo = Field(
        default_factory=TranscodeInfo, alias="transcodedInfo"
    )

    @field_validator("transcoded_info", mode="before")
    @classmethod
    def null_info_as_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def track_url(self) -> str:
        """Content-address reference used as a track URL."""
        return f"yoto:#{self.transcoded_sha256}"


@dataclass(frozen=True)
class ProgressEvent:
    """A progress waypoint emitted by the upload pipeline.

    Attributes:
        stage: Stage the pipeline is in
        progress: Percentage in [0, 100]
        error: Error message, only set on the single failure event
    """

    stage: UploadStage
    progress: float
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["stage"] = self.stage.value
        return {k: v for k, v in data.items() if v is not None}
