"""On-disk storage for OAuth tokens."""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from ..logging import get_logger

logger = get_logger(__name__)


@dataclass
class StoredTokens:
    """Access/refresh token pair as persisted between runs."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class TokenStore:
    """Keeps the token pair in a small JSON file readable only by the user."""

    def __init__(self, token_file: Path):
        self.token_file = Path(token_file)

    def load(self) -> StoredTokens:
        """Load tokens; a missing or unreadable file yields empty tokens."""
        if not self.token_file.exists():
            return StoredTokens()
        try:
            data = json.loads(self.token_file.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Failed to load tokens", path=str(self.token_file), error=str(e))
            return StoredTokens()
        return StoredTokens(
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
        )

    def save(self, access_token: str, refresh_token: Optional[str]) -> None:
        self.token_file.parent.mkdir(parents=True, exist_ok=True)
        self.token_file.write_text(
            json.dumps(asdict(StoredTokens(access_token, refresh_token)), indent=2)
        )
        os.chmod(self.token_file, 0o600)
        logger.debug("Saved tokens", path=str(self.token_file))

    def clear(self) -> None:
        if self.token_file.exists():
            self.token_file.unlink()
            logger.debug("Cleared stored tokens")
