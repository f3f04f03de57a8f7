"""
Logout Use Case

Ends the session of one device. Idempotent.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from chatweet.app.services.unit_of_work import UnitOfWork
from chatweet.domain.entities import LoginAction, LoginHistoryEntry
from chatweet.utils.tokens import hash_session_token
from .dtos import LogoutCommand, LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Use case for explicit sign-out of a device.

    Business Rules:
    - Deactivates the session matching token and device, no-op otherwise
    - Always reports success once the deactivation is committed
    - The logout history row is best-effort
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: LogoutCommand) -> Result[LogoutResponse]:
        async with self.uow:
            try:
                count = await self.uow.sessions.deactivate_by_token(
                    hash_session_token(command.session_token), command.device_id
                )
                await self.uow.commit()
            except SQLAlchemyError as exc:
                logger.exception("Error ending session for user %s", command.user_id)
                return Return.err(Error("STORE_FAILURE", str(exc)))

            try:
                await self.uow.login_history.create(
                    LoginHistoryEntry(
                        user_id=command.user_id,
                        device_id=command.device_id,
                        ip_address=command.ip_address,
                        action=LoginAction.logout,
                        event_metadata={"deactivated_count": count},
                    )
                )
                await self.uow.commit()
            except SQLAlchemyError as exc:
                logger.warning("Could not record logout for user %s: %s", command.user_id, exc)
                await self.uow.rollback()

            return Return.ok(LogoutResponse())
