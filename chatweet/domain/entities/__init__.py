"""
Session Authority Domain Entities

Each entity in its own file.
"""

from .enums import InvalidSessionReason, LoginAction
from .user_session import UserSession
from .login_history import LoginHistoryEntry

__all__ = [
    # Enums
    "LoginAction",
    "InvalidSessionReason",
    # Entities
    "UserSession",
    "LoginHistoryEntry",
]
