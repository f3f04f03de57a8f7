from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import text
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from chatweet.app.repositories.session_repository import ISessionRepository
from chatweet.domain.entities import UserSession


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def lock_user(self, user_id: str) -> None:
        """
        Take a transaction-scoped advisory lock on the user.

        Only PostgreSQL has advisory locks; elsewhere the partial unique
        index on active sessions rejects the losing writer instead.
        """
        dialect = self.session.sync_session.get_bind().dialect.name
        if dialect != "postgresql":
            return
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:user_id))"),
            {"user_id": user_id},
        )

    async def create(self, session_obj: UserSession) -> UserSession:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def get_by_token_hash(self, token_hash: str) -> Optional[UserSession]:
        """Find session by token hash"""
        stmt = select(UserSession).where(UserSession.session_token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.first()

    async def deactivate_all_by_user_id(self, user_id: str) -> int:
        """Deactivate every active session for a user"""
        stmt = (
            update(UserSession)
            .where(UserSession.user_id == user_id, UserSession.is_active == True)
            .values(is_active=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def deactivate_by_token(self, token_hash: str, device_id: str) -> int:
        """Deactivate the active session matching token and device"""
        stmt = (
            update(UserSession)
            .where(
                UserSession.session_token_hash == token_hash,
                UserSession.device_id == device_id,
                UserSession.is_active == True,
            )
            .values(is_active=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def touch(self, session_id: UUID, now: datetime) -> None:
        """Record activity on a session"""
        stmt = (
            update(UserSession)
            .where(UserSession.id == session_id)
            .values(last_activity=now)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def get_live_by_user_id(self, user_id: str, now: datetime) -> List[UserSession]:
        """Active, unexpired sessions for a user, newest activity first"""
        stmt = (
            select(UserSession)
            .where(
                UserSession.user_id == user_id,
                UserSession.is_active == True,
                UserSession.expires_at > now,
            )
            .order_by(UserSession.last_activity.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def deactivate_expired(self, now: datetime) -> int:
        """Deactivate active sessions whose expiry has passed"""
        stmt = (
            update(UserSession)
            .where(UserSession.is_active == True, UserSession.expires_at <= now)
            .values(is_active=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
