"""Yoto API clients.

Each class wraps one group of endpoints and shares a single
``YotoTransport`` for connection pooling and bearer-token injection.
"""

from .cards import CardRepository
from .media import BinaryUploader, TranscodePoller, UploadInitiator
from .transport import YotoTransport

__all__ = [
    "YotoTransport",
    "CardRepository",
    "UploadInitiator",
    "BinaryUploader",
    "TranscodePoller",
]
