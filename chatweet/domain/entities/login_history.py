"""
LoginHistoryEntry Entity

Immutable log of login, logout and forced logout events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from chatweet.domain.base import utcnow
from .enums import LoginAction


class LoginHistoryEntry(SQLModel, table=True):
    """
    LoginHistoryEntry entity - append-only audit of session events.

    Business Rules:
    - Immutable (never updated or deleted by the session authority)
    - Retention is handled outside this service
    - event_metadata stores extra context (revoked_count, session_id)
    """

    __tablename__ = "login_history"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: str = Field(nullable=False, max_length=255)
    device_id: Optional[str] = Field(default=None, max_length=255)
    ip_address: Optional[str] = Field(default=None, max_length=255)

    action: LoginAction
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_login_history_user_created", "user_id", "created_at"),
        Index("idx_login_history_action", "action"),
    )
