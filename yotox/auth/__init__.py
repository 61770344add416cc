"""Token storage and refresh for the Yoto identity provider."""

from .manager import TokenManager, decode_jwt_claims, is_token_expired
from .store import StoredTokens, TokenStore

__all__ = [
    "TokenManager",
    "TokenStore",
    "StoredTokens",
    "decode_jwt_claims",
    "is_token_expired",
]
