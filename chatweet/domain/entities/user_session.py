"""
UserSession Entity

One row per issued session token; at most one active row per user.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from chatweet.domain.base import utcnow


class UserSession(SQLModel, table=True):
    """
    UserSession entity - the device currently allowed to act as a user.

    Business Rules:
    - Only the SHA-256 of the session token is stored
    - A new session deactivates every other session of the user
    - Live means is_active and expires_at in the future
    - Rows are never deleted, only deactivated
    """

    __tablename__ = "user_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: str = Field(nullable=False, index=True, max_length=255)
    session_token_hash: str = Field(unique=True, index=True, max_length=64)
    device_id: str = Field(max_length=255)

    user_agent: Optional[str] = Field(default=None, max_length=1024)
    ip_address: Optional[str] = Field(default=None, max_length=255)

    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    last_activity: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_user_session_expires_at", "expires_at"),
        Index("idx_user_session_user_active", "user_id", "is_active"),
        # One active session per user, enforced by the store
        Index(
            "uq_user_sessions_one_active",
            "user_id",
            unique=True,
            sqlite_where=text("is_active"),
            postgresql_where=text("is_active"),
        ),
    )
