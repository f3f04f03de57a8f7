"""
Create Session Use Case

Signs a device in and forces every other device of the user out.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from libs.result import Error, Result, Return
from chatweet.app.services.unit_of_work import UnitOfWork
from chatweet.domain.base import as_utc, utcnow
from chatweet.domain.entities import LoginAction, LoginHistoryEntry, UserSession
from chatweet.utils.tokens import (
    DEFAULT_SESSION_TTL,
    compute_expiry,
    generate_session_token,
    hash_session_token,
)
from .dtos import CreateSessionCommand, CreateSessionResponse

logger = logging.getLogger(__name__)


class CreateSessionUseCase:
    """
    Use case for issuing the single active session of a user.

    Business Rules:
    - All active sessions of the user are deactivated (forced logout)
    - Deactivation, insert and history rows commit in one transaction,
      so a failure leaves the previous session usable
    - Session expires a fixed TTL (24h by default) after issuance
    - Concurrent creators are serialized by a per-user lock or rejected by
      the one-active-session index; the loser retries from scratch
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        max_attempts: int = 3,
        audit_empty_forced_logout: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.ttl = ttl
        self.max_attempts = max(1, max_attempts)
        self.audit_empty_forced_logout = audit_empty_forced_logout
        self.clock = clock

    async def execute(self, command: CreateSessionCommand) -> Result[CreateSessionResponse]:
        """
        Execute create session use case.

        Args:
            command: user, device and descriptive metadata of the sign-in

        Returns:
            Result with the new token and its expiry, or Error
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._create(command)
            except IntegrityError:
                logger.warning(
                    "Session create conflict for user %s (attempt %d/%d)",
                    command.user_id,
                    attempt,
                    self.max_attempts,
                )
            except SQLAlchemyError as exc:
                logger.exception("Error creating session for user %s", command.user_id)
                return Return.err(Error("STORE_FAILURE", str(exc)))

        return Return.err(
            Error("SESSION_CONFLICT", "Concurrent sign-in detected, please retry")
        )

    async def _create(self, command: CreateSessionCommand) -> Result[CreateSessionResponse]:
        async with self.uow:
            now = self.clock()
            await self.uow.sessions.lock_user(command.user_id)

            revoked_count = await self.uow.sessions.deactivate_all_by_user_id(command.user_id)

            if revoked_count or self.audit_empty_forced_logout:
                await self.uow.login_history.create(
                    LoginHistoryEntry(
                        user_id=command.user_id,
                        device_id=command.device_id,
                        ip_address=command.ip_address,
                        action=LoginAction.forced_logout,
                        event_metadata={"revoked_count": revoked_count},
                        created_at=now,
                    )
                )

            session_token = generate_session_token()
            expires_at = compute_expiry(now, self.ttl)
            session = UserSession(
                user_id=command.user_id,
                session_token_hash=hash_session_token(session_token),
                device_id=command.device_id,
                user_agent=command.user_agent,
                ip_address=command.ip_address,
                created_at=now,
                last_activity=now,
                expires_at=expires_at,
                is_active=True,
            )
            session = await self.uow.sessions.create(session)

            await self.uow.login_history.create(
                LoginHistoryEntry(
                    user_id=command.user_id,
                    device_id=command.device_id,
                    ip_address=command.ip_address,
                    action=LoginAction.login,
                    event_metadata={"session_id": str(session.id)},
                    created_at=now,
                )
            )

            await self.uow.commit()

            if revoked_count:
                logger.info(
                    "Forced logout of %d session(s) for user %s", revoked_count, command.user_id
                )

            return Return.ok(
                CreateSessionResponse(
                    session_token=session_token,
                    expires_at=as_utc(expires_at),
                )
            )
