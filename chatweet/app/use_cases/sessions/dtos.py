"""
Session Use Case DTOs (Data Transfer Objects)

Command and Response classes for the session authority.
Wire names are camelCase; Python attributes stay snake_case.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chatweet.domain.base import as_utc
from chatweet.domain.entities import (
    InvalidSessionReason,
    LoginAction,
    LoginHistoryEntry,
    UserSession,
)


class CamelModel(BaseModel):
    """Base for every DTO that crosses the HTTP boundary"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Commands
# ============================================================================


class CreateSessionCommand(CamelModel):
    """Sign-in on a device: replaces any other active session of the user"""

    user_id: str = Field(..., min_length=1, max_length=255)
    device_id: str = Field(..., min_length=1, max_length=255)
    user_agent: Optional[str] = Field(default=None, max_length=1024)
    ip_address: Optional[str] = Field(default=None, max_length=255)


class ValidateSessionCommand(CamelModel):
    session_token: str = Field(..., min_length=1)
    device_id: str = Field(..., min_length=1, max_length=255)


class LogoutCommand(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=255)
    session_token: str = Field(..., min_length=1)
    device_id: str = Field(..., min_length=1, max_length=255)
    ip_address: Optional[str] = Field(default=None, max_length=255)


class GetActiveSessionsCommand(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=255)


class CleanupExpiredCommand(CamelModel):
    pass


class GetLoginHistoryCommand(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=255)
    limit: Optional[int] = Field(default=None, ge=1, le=100)
    cursor: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class SessionView(CamelModel):
    """Public view of a session record; never carries token material"""

    id: UUID
    user_id: str
    device_id: str
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    last_activity: datetime
    is_active: bool

    @classmethod
    def from_entity(cls, session: UserSession) -> "SessionView":
        return cls(
            id=session.id,
            user_id=session.user_id,
            device_id=session.device_id,
            user_agent=session.user_agent,
            ip_address=session.ip_address,
            created_at=as_utc(session.created_at),
            expires_at=as_utc(session.expires_at),
            last_activity=as_utc(session.last_activity),
            is_active=session.is_active,
        )


class CreateSessionResponse(CamelModel):
    success: bool = True
    session_token: str
    expires_at: datetime
    message: str = "Session created, other devices logged out"


class ValidateSessionResponse(CamelModel):
    valid: bool
    session: Optional[SessionView] = None
    message: Optional[str] = None
    reason: Optional[InvalidSessionReason] = None


class LogoutResponse(CamelModel):
    success: bool = True
    message: str = "Logged out successfully"


class ActiveSessionsResponse(CamelModel):
    sessions: List[SessionView]


class CleanupExpiredResponse(CamelModel):
    success: bool = True
    message: str = "Expired sessions cleaned up"
    cleaned_count: int


class LoginHistoryItem(CamelModel):
    id: UUID
    user_id: str
    device_id: Optional[str] = None
    ip_address: Optional[str] = None
    action: str
    timestamp: datetime
    metadata: dict = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, entry: LoginHistoryEntry) -> "LoginHistoryItem":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            device_id=entry.device_id,
            ip_address=entry.ip_address,
            action=LoginAction(entry.action).value,
            timestamp=as_utc(entry.created_at),
            metadata=entry.event_metadata or {},
        )


class LoginHistoryResponse(CamelModel):
    entries: List[LoginHistoryItem]
    next_cursor: Optional[str] = None
