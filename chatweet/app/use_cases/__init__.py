"""
Use Cases

Organized into domain folders:
- sessions/: Session authority operations
- history/: Login history reads
"""

from .sessions import (
    CreateSessionUseCase,
    ValidateSessionUseCase,
    LogoutUseCase,
    GetActiveSessionsUseCase,
    CleanupExpiredSessionsUseCase,
)
from .history import (
    GetLoginHistoryUseCase,
)

__all__ = [
    # Sessions
    "CreateSessionUseCase",
    "ValidateSessionUseCase",
    "LogoutUseCase",
    "GetActiveSessionsUseCase",
    "CleanupExpiredSessionsUseCase",
    # History
    "GetLoginHistoryUseCase",
]
