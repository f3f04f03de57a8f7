"""
Validate Session Use Case

Checks that a cached token still entitles this device to act as the user.
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from chatweet.app.services.unit_of_work import UnitOfWork
from chatweet.domain.base import as_utc, utcnow
from chatweet.domain.entities import InvalidSessionReason
from chatweet.utils.tokens import hash_session_token
from .dtos import SessionView, ValidateSessionCommand, ValidateSessionResponse

logger = logging.getLogger(__name__)

INVALID_MESSAGE = "Session invalid or expired"


class ValidateSessionUseCase:
    """
    Use case for validating a (token, device) pair.

    Business Rules:
    - Valid only when token and device both match, the session is
      active and expires_at is in the future
    - An invalid session is a normal outcome, not an error
    - last_activity is refreshed best-effort on success
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, command: ValidateSessionCommand) -> Result[ValidateSessionResponse]:
        try:
            async with self.uow:
                session = await self.uow.sessions.get_by_token_hash(
                    hash_session_token(command.session_token)
                )
                now = self.clock()

                reason = None
                if session is None:
                    reason = InvalidSessionReason.unknown_token
                elif session.device_id != command.device_id:
                    reason = InvalidSessionReason.device_mismatch
                elif not session.is_active:
                    reason = InvalidSessionReason.inactive
                elif session.expires_at <= now:
                    reason = InvalidSessionReason.expired

                if reason is not None:
                    return Return.ok(
                        ValidateSessionResponse(valid=False, message=INVALID_MESSAGE, reason=reason)
                    )

                # A failed touch rolls back and expires the row, so read it first
                view = SessionView.from_entity(session)
                try:
                    await self.uow.sessions.touch(view.id, now)
                    await self.uow.commit()
                    view.last_activity = as_utc(now)
                except SQLAlchemyError as exc:
                    logger.warning("Could not record activity for session %s: %s", view.id, exc)
                    await self.uow.rollback()

                return Return.ok(ValidateSessionResponse(valid=True, session=view))
        except SQLAlchemyError as exc:
            logger.exception("Error validating session")
            return Return.err(Error("STORE_FAILURE", str(exc)))
