"""
Get Active Sessions Use Case

Lists the live sessions of a user for device visibility.
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from chatweet.app.services.unit_of_work import UnitOfWork
from chatweet.domain.base import utcnow
from .dtos import ActiveSessionsResponse, GetActiveSessionsCommand, SessionView

logger = logging.getLogger(__name__)


class GetActiveSessionsUseCase:
    """Read-only; normally returns zero or one session"""

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, command: GetActiveSessionsCommand) -> Result[ActiveSessionsResponse]:
        try:
            async with self.uow:
                sessions = await self.uow.sessions.get_live_by_user_id(
                    command.user_id, self.clock()
                )
                # Rows expire when the unit of work rolls back on exit
                views = [SessionView.from_entity(s) for s in sessions]
        except SQLAlchemyError as exc:
            logger.exception("Error listing sessions for user %s", command.user_id)
            return Return.err(Error("STORE_FAILURE", str(exc)))

        return Return.ok(ActiveSessionsResponse(sessions=views))
