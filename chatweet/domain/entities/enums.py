"""
Session Authority Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class LoginAction(str, Enum):
    """Kind of login history entry"""

    login = "login"
    logout = "logout"
    forced_logout = "forced_logout"


class InvalidSessionReason(str, Enum):
    """Why a presented session token failed validation"""

    unknown_token = "unknown_token"
    device_mismatch = "device_mismatch"
    inactive = "inactive"
    expired = "expired"
