import base64
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from chatweet.app.repositories.login_history_repository import ILoginHistoryRepository
from chatweet.domain.entities import LoginHistoryEntry


def encode_cursor(entry: LoginHistoryEntry) -> str:
    raw = f"{entry.created_at.isoformat()}|{entry.id}"
    return base64.b64encode(raw.encode("utf-8")).decode("utf-8")


def decode_cursor(cursor: str) -> Tuple[datetime, UUID]:
    raw = base64.b64decode(cursor).decode("utf-8")
    timestamp_str, id_str = raw.split("|", 1)
    return datetime.fromisoformat(timestamp_str), UUID(id_str)


class LoginHistoryRepository(ILoginHistoryRepository):
    """LoginHistoryEntry repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: LoginHistoryEntry) -> LoginHistoryEntry:
        """Append a history entry (immutable)"""
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_by_user_paginated(
        self, user_id: str, limit: int = 50, cursor: Optional[str] = None
    ) -> Tuple[List[LoginHistoryEntry], Optional[str]]:
        """
        Get history entries for a user with keyset pagination.

        Cursor format: base64 of "<created_at ISO>|<id>" of the last entry
        returned. Entries of one sign-in share created_at, so id breaks ties.
        """
        stmt = select(LoginHistoryEntry).where(LoginHistoryEntry.user_id == user_id)

        if cursor:
            try:
                cursor_timestamp, cursor_id = decode_cursor(cursor)
                stmt = stmt.where(
                    or_(
                        LoginHistoryEntry.created_at < cursor_timestamp,
                        and_(
                            LoginHistoryEntry.created_at == cursor_timestamp,
                            LoginHistoryEntry.id < cursor_id,
                        ),
                    )
                )
            except (ValueError, TypeError):
                # Invalid cursor, start from the newest entry
                pass

        stmt = stmt.order_by(
            LoginHistoryEntry.created_at.desc(), LoginHistoryEntry.id.desc()
        ).limit(limit + 1)

        result = await self.session.exec(stmt)
        entries = list(result.all())

        has_more = len(entries) > limit
        if has_more:
            entries = entries[:limit]

        next_cursor = encode_cursor(entries[-1]) if has_more and entries else None

        return entries, next_cursor
