"""
Get Login History Use Case

Retrieves a user's login, logout and forced logout events with pagination.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from chatweet.app.services.unit_of_work import UnitOfWork
from chatweet.app.use_cases.sessions.dtos import LoginHistoryItem, LoginHistoryResponse

logger = logging.getLogger(__name__)


class GetLoginHistoryUseCase:
    """
    Use case for reading the login history of a user.

    Business Rules:
    - Results are scoped to one user
    - Results ordered by newest first
    - Supports cursor-based pagination
    """

    def __init__(self, uow: UnitOfWork, default_limit: int = 50):
        self.uow = uow
        self.default_limit = default_limit

    async def execute(
        self,
        user_id: str,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> Result[LoginHistoryResponse]:
        """
        Execute get login history use case.

        Args:
            user_id: Account whose history is read
            limit: Maximum number of entries to return
            cursor: Pagination cursor from a previous page (optional)

        Returns:
            Result with entries and next_cursor, or Error
        """
        try:
            async with self.uow:
                entries, next_cursor = await self.uow.login_history.get_by_user_paginated(
                    user_id, limit=limit or self.default_limit, cursor=cursor
                )
                items = [LoginHistoryItem.from_entity(e) for e in entries]
        except SQLAlchemyError as exc:
            logger.exception("Error reading login history for user %s", user_id)
            return Return.err(Error("STORE_FAILURE", str(exc)))

        return Return.ok(
            LoginHistoryResponse(
                entries=items,
                next_cursor=next_cursor,
            )
        )
