import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.sessions = MagicMock()
    uow.sessions.lock_user = AsyncMock()
    uow.sessions.create = AsyncMock(side_effect=lambda session: session)
    uow.sessions.get_by_token_hash = AsyncMock(return_value=None)
    uow.sessions.deactivate_all_by_user_id = AsyncMock(return_value=0)
    uow.sessions.deactivate_by_token = AsyncMock(return_value=0)
    uow.sessions.touch = AsyncMock()
    uow.sessions.get_live_by_user_id = AsyncMock(return_value=[])
    uow.sessions.deactivate_expired = AsyncMock(return_value=0)

    uow.login_history = MagicMock()
    uow.login_history.create = AsyncMock(side_effect=lambda entry: entry)
    uow.login_history.get_by_user_paginated = AsyncMock(return_value=([], None))
    return uow
