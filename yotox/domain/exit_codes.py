"""Standardized exit codes for yotox CLI commands.

Following POSIX conventions and common CLI practices.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for yotox CLI commands."""

    SUCCESS = 0
    """Command completed successfully."""

    USER_ERROR = 1
    """User error: invalid arguments, file not found, not logged in."""

    SYSTEM_ERROR = 2
    """System error: network failure, token refresh rejected."""

    PROCESSING_ERROR = 3
    """Processing error: upload, transcode or card update failed."""

    INTERRUPTED = 130
    """User interrupted with SIGINT (Ctrl+C)."""
