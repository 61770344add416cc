"""Helpers shared by CLI commands."""

import sys
from typing import NoReturn

from rich.console import Console

from yotox.auth import TokenManager, TokenStore
from yotox.config import get_config
from yotox.domain.exit_codes import ExitCode
from yotox.errors import AuthRequiredError, TokenRefreshError

console = Console(stderr=True)


def token_manager() -> TokenManager:
    config = get_config()
    return TokenManager(
        TokenStore(config.token_file),
        client_id=config.client_id,
        auth_url=config.auth_url,
        audience=config.audience,
        max_retries=config.max_retries,
    )


def fail(message: str, code: ExitCode) -> NoReturn:
    console.print(f"[red]✗ Error:[/red] {message}")
    sys.exit(code)


def require_access_token() -> str:
    """Return a valid access token or exit asking the user to log in."""
    try:
        access_token = token_manager().get_valid_access_token()
    except TokenRefreshError as e:
        fail(f"{e}\nRun 'yotox login' again.", ExitCode.SYSTEM_ERROR)
    if not access_token:
        fail(str(AuthRequiredError()), ExitCode.USER_ERROR)
    return access_token
