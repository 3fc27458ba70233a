"""
API key authentication.

feedhub is single-tenant: one shared key from AUTH_API_KEY guards every
route except /status. With no key configured the API is open, which is
how local development runs.
"""

import secrets

from fastapi import Security
from fastapi.security import APIKeyHeader

from .config import config
from .exceptions import AuthenticationError

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def auth_enabled() -> bool:
    return bool(config.AUTH_API_KEY)


def verify_api_key(api_key: str | None = Security(API_KEY_HEADER)) -> None:
    """
    Route dependency that rejects requests without the configured key.

    Raises:
        AuthenticationError: auth is enabled and the key is missing or wrong
    """
    if not auth_enabled():
        return

    if not api_key:
        raise AuthenticationError("Missing API key. Provide X-API-Key header.")
    if not secrets.compare_digest(api_key.encode(), config.AUTH_API_KEY.encode()):
        raise AuthenticationError("Invalid API key")
