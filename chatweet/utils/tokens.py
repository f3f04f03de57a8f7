"""
Session token helpers shared by the session authority and its tests.
"""

import hashlib
from datetime import datetime, timedelta
from uuid import uuid4

DEFAULT_SESSION_TTL = timedelta(hours=24)


def generate_session_token() -> str:
    """
    Generate an opaque bearer token.

    Two independent random UUID4s joined by a dash (244 random bits).
    """
    return f"{uuid4()}-{uuid4()}"


def hash_session_token(token: str) -> str:
    """SHA-256 hex digest used as the stored lookup key for a token"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def compute_expiry(issued_at: datetime, ttl: timedelta = DEFAULT_SESSION_TTL) -> datetime:
    return issued_at + ttl
