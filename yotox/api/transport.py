"""Authenticated HTTP access to the Yoto API."""

from typing import Any, Optional

import httpx

from ..logging import get_logger

logger = get_logger(__name__)


class YotoTransport:
    """Thin wrapper around ``httpx.Client`` that injects the bearer token.

    The token is added per request rather than as a client default, so the
    same connection pool can PUT to pre-signed upload URLs without leaking
    the ``Authorization`` header to the storage host.

    Attributes:
        base_url: API root, e.g. ``https://api.yotoplay.com``
        timeout: Request timeout in seconds for owned clients
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.yotoplay.com",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            # long read timeout for large audio uploads
            self._client = httpx.Client(timeout=httpx.Timeout(self.timeout, read=300.0))
        return self._client

    @property
    def auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
        self._client = None

    def __enter__(self) -> "YotoTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send an authenticated request to ``{base_url}/{path}``.

        Transport errors propagate as ``httpx.RequestError``; status codes are
        left for the caller to interpret.
        """
        headers = {**self.auth_headers, **kwargs.pop("headers", {})}
        response = self.client.request(method, self.url(path), headers=headers, **kwargs)
        logger.debug(
            "API request",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def put_unauthenticated(self, url: str, content: bytes, content_type: str) -> httpx.Response:
        """PUT raw bytes to an absolute, pre-signed URL."""
        return self.client.put(url, content=content, headers={"Content-Type": content_type})
