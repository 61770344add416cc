"""Rewrite a card so it plays a single freshly transcoded audio file."""

import copy
import math
from typing import Any, Dict, Optional

from ..domain.models import TranscodeResult

# Default 16x16 chapter icon
DEFAULT_CHAPTER_ICON = "yoto:#aUm9i3ex3qqAMYBv-i-O-pYMKuMJGICtR3Vhf289u2Q"


def readable_file_size(file_size: Optional[int]) -> Optional[float]:
    """Bytes to megabytes, rounded half-up to one decimal place."""
    if file_size is None:
        return None
    return math.floor(file_size / 1024 / 1024 * 10 + 0.5) / 10


def build_chapter(transcode: TranscodeResult, title: str) -> Dict[str, Any]:
    """Build chapter "01" holding a single audio track."""
    info = transcode.transcoded_info
    return {
        "key": "01",
        "title": title,
        "overlayLabel": "1",
        "tracks": [
            {
                "key": "01",
                "title": title,
                "trackUrl": transcode.track_url,
                "duration": info.duration,
                "fileSize": info.file_size,
                "channels": info.channels,
                "format": info.format,
                "type": "audio",
                "overlayLabel": "1",
            }
        ],
        "display": {"icon16x16": DEFAULT_CHAPTER_ICON},
    }


def mutate_card(
    existing_card: Dict[str, Any],
    transcode: TranscodeResult,
    new_title: str,
) -> Dict[str, Any]:
    """Return a copy of ``existing_card`` whose content is the transcoded audio.

    The chapter list is replaced by one chapter with one track. The chapter
    is named after the audio's embedded title, or the card's current title
    when the file has none; ``new_title`` only renames the card itself.
    Every other field is carried over as-is and the input is left untouched.
    """
    card = copy.deepcopy(existing_card)
    info = transcode.transcoded_info
    chapter_title = info.metadata.title or existing_card.get("title")

    content = card.get("content")
    if not isinstance(content, dict):
        content = card["content"] = {}
    content["chapters"] = [build_chapter(transcode, chapter_title)]

    card["title"] = new_title

    metadata = card.get("metadata")
    if not isinstance(metadata, dict):
        metadata = card["metadata"] = {}
    media = metadata.get("media")
    if not isinstance(media, dict):
        media = metadata["media"] = {}

    media["duration"] = info.duration
    media["fileSize"] = info.file_size
    media["readableFileSize"] = readable_file_size(info.file_size)
    media["hasStreams"] = False

    return card
