"""
Login History Use Cases
"""

from .get_login_history_use_case import GetLoginHistoryUseCase

__all__ = [
    "GetLoginHistoryUseCase",
]
