#!/usr/bin/env python3
"""
Error types and retry utilities for yotox.
"""

import logging
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import get_config
from .logging import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class YotoxError(Exception):
    """Base exception for yotox-specific errors."""

    pass


class NetworkError(YotoxError):
    """Raised when network operations fail."""

    pass


class AuthRequiredError(YotoxError):
    """No usable access token is available; the user has to log in again."""

    def __init__(self, message: str = "Authentication required. Run 'yotox login' first."):
        super().__init__(message)


class TokenRefreshError(YotoxError):
    """The identity provider rejected a refresh-token grant."""

    def __init__(self, status_code: int, response_text: str):
        super().__init__(f"Failed to refresh token: {status_code} {response_text}")
        self.status_code = status_code
        self.response_text = response_text


class CardListError(YotoxError):
    """Listing the user's cards failed."""

    pass


class UploadError(YotoxError):
    """Base class for failures of the card upload pipeline.

    Attributes:
        stage: Pipeline stage that failed
    """

    stage = "unknown"


class UploadTargetError(UploadError):
    """The API did not hand out a usable upload URL."""

    stage = "requesting-target"


class UploadTransportError(UploadError):
    """Sending the audio bytes to the upload URL failed."""

    stage = "uploading"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TranscodeTimeoutError(UploadError):
    """Transcoding did not finish within the polling budget."""

    stage = "transcoding"

    def __init__(self, upload_id: str, attempts: int, poll_interval: float):
        message = (
            f"Transcoding of upload {upload_id} timed out after {attempts} attempts "
            f"(~{attempts * poll_interval:.1f}s)"
        )
        super().__init__(message)
        self.upload_id = upload_id
        self.attempts = attempts
        self.poll_interval = poll_interval


class CardFetchError(UploadError):
    """Reading the card to update failed."""

    stage = "fetching-card"

    def __init__(self, card_id: str, status_code: Optional[int] = None):
        message = f"Failed to fetch card {card_id}"
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)
        self.card_id = card_id
        self.status_code = status_code


class CardSaveError(UploadError):
    """Writing the updated card failed.

    Attributes:
        response_text: Raw body returned by the API, kept for diagnostics
    """

    stage = "saving"

    def __init__(self, response_text: str, status_code: Optional[int] = None):
        super().__init__(f"Failed to update card: {response_text}")
        self.response_text = response_text
        self.status_code = status_code


class UploadCancelledError(UploadError):
    """The caller cancelled the upload."""

    stage = "cancelled"

    def __init__(self, message: str = "Upload cancelled"):
        super().__init__(message)


def with_retries(
    stop_after: Optional[int] = None,
    wait_multiplier: float = 1.0,
    wait_min: float = 1.0,
    wait_max: float = 10.0,
    retry_on: Tuple[Type[Exception], ...] = (
        httpx.TransportError,
        NetworkError,
    ),
) -> Callable[[F], F]:
    """
    Decorator to add retry logic to functions.

    Only used around identity-provider calls. Upload pipeline stages are
    never retried.

    Args:
        stop_after: Maximum number of attempts (defaults to config)
        wait_multiplier: Exponential backoff multiplier
        wait_min: Minimum wait time between retries
        wait_max: Maximum wait time between retries
        retry_on: Exception types to retry on
    """
    if stop_after is None:
        stop_after = get_config().max_retries

    def decorator(func: F) -> F:
        @retry(
            stop=stop_after_attempt(stop_after),
            wait=wait_exponential(multiplier=wait_multiplier, min=wait_min, max=wait_max),
            retry=retry_if_exception_type(retry_on),
            before_sleep=before_sleep_log(logger, logging.WARNING),  # type: ignore[arg-type]
            reraise=True,
        )
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if isinstance(e, retry_on) and not isinstance(e, NetworkError):
                    logger.warning("Retryable error occurred", error=str(e), function=func.__name__)
                    raise NetworkError(f"Network operation failed: {e}") from e
                raise

        return wrapper  # type: ignore[return-value]

    return decorator
