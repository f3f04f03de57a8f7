from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from chatweet.domain.entities import UserSession


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def lock_user(self, user_id: str) -> None:
        """Serialize session creation for a user until the transaction ends"""
        pass

    @abstractmethod
    async def create(self, session: UserSession) -> UserSession:
        """Create a new session"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[UserSession]:
        """Find session by the SHA-256 of its token"""
        pass

    @abstractmethod
    async def deactivate_all_by_user_id(self, user_id: str) -> int:
        """Deactivate every active session of a user. Returns count."""
        pass

    @abstractmethod
    async def deactivate_by_token(self, token_hash: str, device_id: str) -> int:
        """Deactivate the session matching token and device. Returns count."""
        pass

    @abstractmethod
    async def touch(self, session_id: UUID, now: datetime) -> None:
        """Set last_activity on a session"""
        pass

    @abstractmethod
    async def get_live_by_user_id(self, user_id: str, now: datetime) -> List[UserSession]:
        """Active, unexpired sessions of a user, most recent activity first"""
        pass

    @abstractmethod
    async def deactivate_expired(self, now: datetime) -> int:
        """Deactivate active sessions with expires_at <= now. Returns count."""
        pass
