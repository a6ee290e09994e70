"""API key authentication utilities."""

import logging

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from motoshop.config import settings

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def verify_api_key(api_key: str | None) -> str:
    """Verify an API key and return the associated username.

    Args:
        api_key: The API key to verify

    Returns:
        Username associated with the API key

    Raises:
        HTTPException: If API key is missing or invalid
    """
    if not api_key:
        logger.warning("API key missing from request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key. Provide X-API-Key header.",
        )

    api_keys = settings.get_api_keys()
    username = api_keys.get(api_key)
    if username is None:
        logger.warning(f"Rejected unknown API key {api_key[:4]}...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key.",
        )

    logger.debug(f"API key validated for user: {username}")
    return username


async def get_current_user(api_key: str | None = Security(api_key_header)) -> str:
    """FastAPI dependency to get the current authenticated user."""
    return verify_api_key(api_key)
