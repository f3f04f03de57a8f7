from sqlmodel.ext.asyncio.session import AsyncSession

from chatweet.adapter.repositories.login_history_repository import LoginHistoryRepository
from chatweet.adapter.repositories.session_repository import SessionRepository
from chatweet.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.sessions = SessionRepository(self.session)
        self.login_history = LoginHistoryRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
