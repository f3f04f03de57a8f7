"""
Unit tests for Validate Session Use Case
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from chatweet.app.use_cases.sessions import ValidateSessionCommand, ValidateSessionUseCase
from chatweet.domain.entities import InvalidSessionReason, UserSession
from chatweet.utils.tokens import hash_session_token

ISSUED_AT = datetime(2026, 3, 14, 9, 30, 0)
EXPIRES_AT = ISSUED_AT + timedelta(hours=24)
TOKEN = "11111111-1111-4111-8111-111111111111-22222222-2222-4222-8222-222222222222"


def make_session(**overrides):
    fields = {
        "id": uuid4(),
        "user_id": "user-1",
        "session_token_hash": hash_session_token(TOKEN),
        "device_id": "device-1",
        "created_at": ISSUED_AT,
        "last_activity": ISSUED_AT,
        "expires_at": EXPIRES_AT,
        "is_active": True,
    }
    fields.update(overrides)
    return UserSession(**fields)


async def validate(mock_uow, now, device_id="device-1", token=TOKEN):
    use_case = ValidateSessionUseCase(mock_uow, clock=lambda: now)
    return await use_case.execute(ValidateSessionCommand(session_token=token, device_id=device_id))


@pytest.mark.asyncio
async def test_valid_session_updates_last_activity(mock_uow):
    session = make_session()
    mock_uow.sessions.get_by_token_hash = AsyncMock(return_value=session)
    now = ISSUED_AT + timedelta(hours=1)

    result = await validate(mock_uow, now)

    assert result.is_ok()
    assert result.value.valid is True
    assert result.value.session.device_id == "device-1"
    assert result.value.session.last_activity.replace(tzinfo=None) == now
    mock_uow.sessions.get_by_token_hash.assert_called_once_with(hash_session_token(TOKEN))
    mock_uow.sessions.touch.assert_called_once_with(session.id, now)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unknown_token(mock_uow):
    result = await validate(mock_uow, ISSUED_AT)

    assert result.is_ok()
    assert result.value.valid is False
    assert result.value.reason == InvalidSessionReason.unknown_token
    assert result.value.session is None
    mock_uow.sessions.touch.assert_not_called()


@pytest.mark.asyncio
async def test_token_from_another_device_is_rejected(mock_uow):
    mock_uow.sessions.get_by_token_hash = AsyncMock(return_value=make_session())

    result = await validate(mock_uow, ISSUED_AT, device_id="device-2")

    assert result.value.valid is False
    assert result.value.reason == InvalidSessionReason.device_mismatch
    mock_uow.sessions.touch.assert_not_called()


@pytest.mark.asyncio
async def test_superseded_session_is_rejected(mock_uow):
    mock_uow.sessions.get_by_token_hash = AsyncMock(return_value=make_session(is_active=False))

    result = await validate(mock_uow, ISSUED_AT)

    assert result.value.valid is False
    assert result.value.reason == InvalidSessionReason.inactive


@pytest.mark.asyncio
async def test_expiry_boundary(mock_uow):
    """Valid one second before expiry, invalid at and after it"""
    mock_uow.sessions.get_by_token_hash = AsyncMock(return_value=make_session())

    before = await validate(mock_uow, EXPIRES_AT - timedelta(seconds=1))
    at = await validate(mock_uow, EXPIRES_AT)
    after = await validate(mock_uow, EXPIRES_AT + timedelta(seconds=1))

    assert before.value.valid is True
    assert at.value.valid is False
    assert after.value.valid is False
    assert after.value.reason == InvalidSessionReason.expired


@pytest.mark.asyncio
async def test_activity_update_failure_does_not_fail_validation(mock_uow):
    mock_uow.sessions.get_by_token_hash = AsyncMock(return_value=make_session())
    mock_uow.sessions.touch = AsyncMock(
        side_effect=OperationalError("UPDATE", {}, Exception("database is locked"))
    )

    result = await validate(mock_uow, ISSUED_AT + timedelta(minutes=5))

    assert result.is_ok()
    assert result.value.valid is True
    mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
async def test_lookup_failure_is_store_failure(mock_uow):
    mock_uow.sessions.get_by_token_hash = AsyncMock(
        side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
    )

    result = await validate(mock_uow, ISSUED_AT)

    assert result.is_err()
    assert result.error.code == "STORE_FAILURE"
