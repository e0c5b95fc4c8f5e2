"""Bearer API-key authentication for the REST API"""
import hmac
import logging
from typing import Optional
from fastapi import Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from counsy.config import get_api_keys
from counsy.exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as AuthenticationError (401)
bearer_scheme = HTTPBearer(auto_error=False)


def _key_matches(presented: str, valid_keys: list[str]) -> bool:
    # compare_digest on every key, no early exit on the first mismatch
    matches = [hmac.compare_digest(presented.encode(), key.encode()) for key in valid_keys]
    return any(matches)


async def verify_api_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme)
) -> str:
    """
    Verify the API key from the Authorization header

    Returns:
        The verified API key

    Raises:
        ConfigurationError: no API_KEYS configured (every request is rejected)
        AuthenticationError: header missing or key unknown
    """
    valid_keys = get_api_keys()

    if not valid_keys:
        raise ConfigurationError("No API_KEYS configured, rejecting request", config_key="API_KEYS")

    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")

    api_key = credentials.credentials
    if not _key_matches(api_key, valid_keys):
        raise AuthenticationError(f"Invalid API key: {api_key[:4]}...")

    return api_key
