"""
Session Manager API Route

Single JSON endpoint dispatching on ``action``:
create_session, validate_session, logout, get_active_sessions,
cleanup_expired, get_login_history.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, ValidationError

from libs.result import Error, Result
from chatweet.api.error import ClientError, ServerError
from chatweet.api.utils.service_auth import verify_service_api_key
from chatweet.app.services.unit_of_work import UnitOfWork
from chatweet.app.use_cases.history import GetLoginHistoryUseCase
from chatweet.app.use_cases.sessions import (
    CleanupExpiredCommand,
    CleanupExpiredSessionsUseCase,
    CreateSessionCommand,
    CreateSessionUseCase,
    GetActiveSessionsCommand,
    GetActiveSessionsUseCase,
    LogoutCommand,
    LogoutUseCase,
    ValidateSessionCommand,
    ValidateSessionResponse,
    ValidateSessionUseCase,
)
from chatweet.app.use_cases.sessions.dtos import GetLoginHistoryCommand
from chatweet.depends import get_unit_of_work
from config import ApplicationConfig

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sessions"])


def client_ip(request: Request, supplied: Optional[str]) -> Optional[str]:
    """Caller-supplied IP, else first X-Forwarded-For hop, else the peer address"""
    if supplied:
        return supplied
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


async def create_session(
    command: CreateSessionCommand, request: Request, uow: UnitOfWork
) -> Result:
    command.ip_address = client_ip(request, command.ip_address)
    use_case = CreateSessionUseCase(
        uow,
        ttl=timedelta(hours=ApplicationConfig.SESSION_TTL_HOURS),
        max_attempts=ApplicationConfig.CREATE_SESSION_MAX_ATTEMPTS,
        audit_empty_forced_logout=ApplicationConfig.AUDIT_EMPTY_FORCED_LOGOUT,
    )
    return await use_case.execute(command)


async def validate_session(
    command: ValidateSessionCommand, request: Request, uow: UnitOfWork
) -> Result:
    return await ValidateSessionUseCase(uow).execute(command)


async def logout(command: LogoutCommand, request: Request, uow: UnitOfWork) -> Result:
    command.ip_address = client_ip(request, command.ip_address)
    return await LogoutUseCase(uow).execute(command)


async def get_active_sessions(
    command: GetActiveSessionsCommand, request: Request, uow: UnitOfWork
) -> Result:
    return await GetActiveSessionsUseCase(uow).execute(command)


async def cleanup_expired(
    command: CleanupExpiredCommand, request: Request, uow: UnitOfWork
) -> Result:
    return await CleanupExpiredSessionsUseCase(uow).execute()


async def get_login_history(
    command: GetLoginHistoryCommand, request: Request, uow: UnitOfWork
) -> Result:
    use_case = GetLoginHistoryUseCase(uow, default_limit=ApplicationConfig.HISTORY_PAGE_LIMIT)
    return await use_case.execute(command.user_id, limit=command.limit, cursor=command.cursor)


Handler = Callable[[Any, Request, UnitOfWork], Awaitable[Result]]

ACTIONS: Dict[str, Tuple[Type[BaseModel], Handler]] = {
    "create_session": (CreateSessionCommand, create_session),
    "validate_session": (ValidateSessionCommand, validate_session),
    "logout": (LogoutCommand, logout),
    "get_active_sessions": (GetActiveSessionsCommand, get_active_sessions),
    "cleanup_expired": (CleanupExpiredCommand, cleanup_expired),
    "get_login_history": (GetLoginHistoryCommand, get_login_history),
}


def describe_validation_error(exc: ValidationError) -> str:
    fields = []
    for err in exc.errors():
        name = ".".join(str(part) for part in err["loc"]) or "body"
        fields.append(f"{name} ({err['msg']})")
    return "Invalid request: " + ", ".join(fields)


async def read_payload(request: Request) -> Dict[str, Any]:
    """JSON object body of the request; anything else is a client error"""
    try:
        payload = await request.json()
    except ValueError:
        raise ClientError(Error("INVALID_REQUEST", "Request body must be a JSON object"))
    if not isinstance(payload, dict):
        raise ClientError(Error("INVALID_REQUEST", "Request body must be a JSON object"))
    return payload


@router.options("/session-manager", include_in_schema=False)
async def session_manager_preflight():
    return Response(status_code=status.HTTP_200_OK)


@router.post("/session-manager", status_code=status.HTTP_200_OK)
async def session_manager(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    _: bool = Depends(verify_service_api_key),
):
    """
    Session Manager

    Enforces one active session per account across devices.

    Raises:
        - 400 Bad Request: Unknown action or invalid fields
        - 401 Unauthorized: Missing/invalid service key (when configured)
        - 409 Conflict: Concurrent sign-in could not be resolved
        - 500 Internal Server Error: Store failure
        - 503 Service Unavailable: Store timeout
    """
    payload = await read_payload(request)
    action = payload.get("action")
    entry = ACTIONS.get(action) if isinstance(action, str) else None
    if entry is None:
        raise ClientError(Error("UNKNOWN_ACTION", f"Unknown action: {action}"))

    command_type, handler = entry
    try:
        command = command_type.model_validate(payload)
    except ValidationError as exc:
        raise ClientError(Error("INVALID_REQUEST", describe_validation_error(exc)))

    logger.info("Session manager action: %s for user: %s", action, payload.get("userId"))

    try:
        result = await asyncio.wait_for(
            handler(command, request, uow),
            timeout=ApplicationConfig.STORE_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        raise ServerError(
            Error("STORE_TIMEOUT", f"Session store did not answer {action} in time"),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if result.is_err():
        error = result.error
        if error.code == "SESSION_CONFLICT":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    # Invalid validations omit the session key entirely
    exclude_unset = isinstance(result.value, ValidateSessionResponse)
    return result.value.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)
