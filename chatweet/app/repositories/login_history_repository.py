from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from chatweet.domain.entities import LoginHistoryEntry


class ILoginHistoryRepository(ABC):
    """LoginHistoryEntry repository interface - application layer"""

    @abstractmethod
    async def create(self, entry: LoginHistoryEntry) -> LoginHistoryEntry:
        """Append a history entry (immutable)"""
        pass

    @abstractmethod
    async def get_by_user_paginated(
        self, user_id: str, limit: int = 50, cursor: Optional[str] = None
    ) -> Tuple[List[LoginHistoryEntry], Optional[str]]:
        """
        Get history entries for a user with cursor-based pagination.

        Returns:
            Tuple of (entries list, next_cursor)
            - entries: ordered by created_at DESC
            - next_cursor: Cursor for next page, None if no more entries
        """
        pass
