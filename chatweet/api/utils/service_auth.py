"""
Service API Key Authentication

Guards the session-manager endpoint when a service key is configured.
"""

import secrets
from typing import Optional

from fastapi import Header, status
from libs.result import Error
from chatweet.api.error import ClientError
from config import ApplicationConfig


async def verify_service_api_key(
    apikey: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
):
    """
    Verify the caller's service key.

    The key is read from the ``apikey`` header, falling back to an
    ``Authorization: Bearer <key>`` header. With no SERVICE_API_KEY
    configured every caller is accepted.

    Raises:
        ClientError: 401 if key is missing or invalid

    Returns:
        True if valid
    """
    expected_key = getattr(ApplicationConfig, "SERVICE_API_KEY", "")
    if not expected_key:
        return True

    presented_key = apikey
    if not presented_key and authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer":
            presented_key = credentials.strip()

    if not presented_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Service API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if not secrets.compare_digest(presented_key, expected_key):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid service API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
