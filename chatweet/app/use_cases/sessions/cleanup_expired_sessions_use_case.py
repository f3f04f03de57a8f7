"""
Cleanup Expired Sessions Use Case

Maintenance sweep: deactivates sessions past their expiry.
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from chatweet.app.services.unit_of_work import UnitOfWork
from chatweet.domain.base import utcnow
from .dtos import CleanupExpiredResponse

logger = logging.getLogger(__name__)


class CleanupExpiredSessionsUseCase:
    """
    Business Rules:
    - Only flips is_active, rows are kept
    - Idempotent, writes no history
    - Validation already rejects expired rows, so this is hygiene only
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self) -> Result[CleanupExpiredResponse]:
        try:
            async with self.uow:
                count = await self.uow.sessions.deactivate_expired(self.clock())
                await self.uow.commit()
        except SQLAlchemyError as exc:
            logger.exception("Error cleaning up expired sessions")
            return Return.err(Error("STORE_FAILURE", str(exc)))

        if count:
            logger.info("Deactivated %d expired session(s)", count)
        return Return.ok(CleanupExpiredResponse(cleaned_count=count))
