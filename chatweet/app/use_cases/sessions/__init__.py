"""
Session Use Cases

Everything the session authority does against the session store.
"""

from .create_session_use_case import CreateSessionUseCase
from .validate_session_use_case import ValidateSessionUseCase
from .logout_use_case import LogoutUseCase
from .get_active_sessions_use_case import GetActiveSessionsUseCase
from .cleanup_expired_sessions_use_case import CleanupExpiredSessionsUseCase
from .dtos import (
    ActiveSessionsResponse,
    CleanupExpiredCommand,
    CleanupExpiredResponse,
    CreateSessionCommand,
    CreateSessionResponse,
    GetActiveSessionsCommand,
    LogoutCommand,
    LogoutResponse,
    SessionView,
    ValidateSessionCommand,
    ValidateSessionResponse,
)

__all__ = [
    # Use Cases
    "CreateSessionUseCase",
    "ValidateSessionUseCase",
    "LogoutUseCase",
    "GetActiveSessionsUseCase",
    "CleanupExpiredSessionsUseCase",
    # DTOs - Commands
    "CreateSessionCommand",
    "ValidateSessionCommand",
    "LogoutCommand",
    "GetActiveSessionsCommand",
    "CleanupExpiredCommand",
    # DTOs - Responses
    "CreateSessionResponse",
    "ValidateSessionResponse",
    "LogoutResponse",
    "ActiveSessionsResponse",
    "CleanupExpiredResponse",
    "SessionView",
]
