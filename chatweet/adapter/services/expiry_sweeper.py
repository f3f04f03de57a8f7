"""
Periodic sweep that deactivates expired sessions.

Validation already rejects expired rows; the sweep only keeps
is_active honest for listings and reporting.
"""

import asyncio
import logging
from typing import Callable, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from chatweet.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from chatweet.app.use_cases.sessions import CleanupExpiredSessionsUseCase

logger = logging.getLogger(__name__)


class ExpirySweeper:
    def __init__(self, session_factory: Callable[[], AsyncSession], interval_seconds: float):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    async def sweep_once(self) -> int:
        async with self.session_factory() as session:
            result = await CleanupExpiredSessionsUseCase(SqlAlchemyUnitOfWork(session)).execute()
        if result.is_err():
            logger.error("Expiry sweep failed: %s", result.error.message)
            return 0
        return result.value.cleaned_count

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.sweep_once()

    def start(self) -> None:
        if self._task is None:
            logger.info("Starting expiry sweeper every %ss", self.interval_seconds)
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
