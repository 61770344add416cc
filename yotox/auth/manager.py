"""Access-token lifecycle: expiry check and refresh-token rotation."""

import base64
import json
import time
from typing import Any, Optional

import httpx

from ..errors import TokenRefreshError, with_retries
from ..logging import get_logger
from .store import TokenStore

logger = get_logger(__name__)


def decode_jwt_claims(token: str) -> Optional[dict[str, Any]]:
    """Decode a JWT payload without verifying its signature."""
    parts = token.split(".")
    if len(parts) != 3:
        return None

    payload = parts[1]
    payload += "=" * (-len(payload) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload))
    except ValueError:
        return None
    return claims if isinstance(claims, dict) else None


def is_token_expired(token: str, now: Optional[float] = None) -> bool:
    """True when the token's ``exp`` claim has passed or cannot be read."""
    claims = decode_jwt_claims(token)
    if claims is None:
        return True
    try:
        exp = float(claims.get("exp") or 0)
    except (TypeError, ValueError):
        return True
    now = time.time() if now is None else now
    return now >= exp


class TokenManager:
    """Hands out a valid access token, refreshing it when it has expired.

    Attributes:
        store: Where the token pair is persisted
        client_id: OAuth client id registered with the identity provider
        auth_url: Identity provider root, e.g. ``https://login.yotoplay.com``
        audience: API audience requested on refresh
    """

    def __init__(
        self,
        store: TokenStore,
        client_id: Optional[str],
        auth_url: str = "https://login.yotoplay.com",
        audience: str = "https://api.yotoplay.com",
        max_retries: int = 3,
        client: Optional[httpx.Client] = None,
    ):
        self.store = store
        self.client_id = client_id
        self.auth_url = auth_url.rstrip("/")
        self.audience = audience
        self.max_retries = max_retries
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=30.0)
        return self._client

    def get_valid_access_token(self) -> Optional[str]:
        """Return a usable access token, or None when the user must log in.

        Raises:
            TokenRefreshError: If the identity provider rejects the refresh
        """
        tokens = self.store.load()
        if not tokens.access_token:
            return None

        if not is_token_expired(tokens.access_token):
            return tokens.access_token

        if not tokens.refresh_token or not self.client_id:
            logger.info("Access token expired and cannot be refreshed")
            return None

        return self.refresh_access_token(tokens.refresh_token)

    def refresh_access_token(self, refresh_token: str) -> str:
        """Exchange a refresh token for a new access token and store both."""
        logger.info("Refreshing access token")
        post = with_retries(stop_after=self.max_retries)(self.client.post)
        response = post(
            f"{self.auth_url}/oauth/token",
            data={
                "grant_type": "refresh_token",
                "client_id": self.client_id,
                "refresh_token": refresh_token,
                "audience": self.audience,
            },
        )

        if response.status_code >= 400:
            logger.error("Failed to refresh token", status_code=response.status_code)
            raise TokenRefreshError(response.status_code, response.text)

        data = response.json()
        access_token = data["access_token"]
        # Rotation is optional; keep the old refresh token if none is returned
        new_refresh_token = data.get("refresh_token") or refresh_token
        self.store.save(access_token, new_refresh_token)
        logger.info("Token refresh successful")
        return access_token
