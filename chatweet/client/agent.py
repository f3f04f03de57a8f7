"""
Client Session Agent

Runs next to the UI. Holds the device fingerprint and the issued token,
and is the one place the application asks "may this device act as the
signed-in user?". The identity provider only issues credentials; a user
it considers signed in is still unauthenticated here until the session
authority confirms this device.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from config import ApplicationConfig
from chatweet.utils.fingerprint import default_screen, default_user_agent, generate_device_id
from .storage import FileKeyValueStore, SessionCache, StoredSession

logger = logging.getLogger(__name__)


class AgentState(str, Enum):
    unauthenticated = "unauthenticated"
    pending = "pending"
    authenticated = "authenticated"


class AuthEvent(str, Enum):
    """Identity provider events the agent reacts to"""

    signed_in = "SIGNED_IN"
    signed_out = "SIGNED_OUT"


class SessionAuthorityError(Exception):
    """The session authority could not be reached or answered with an error"""


class ClientSessionAgent:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        cache: SessionCache,
        user_agent: Optional[str] = None,
        screen: Optional[str] = None,
        endpoint: str = "/session-manager",
    ):
        self.http_client = http_client
        self.cache = cache
        self.user_agent = user_agent or default_user_agent()
        self.screen = screen or default_screen()
        self.endpoint = endpoint
        self.state = AgentState.unauthenticated
        self.session: Optional[StoredSession] = None
        self._pending: Optional[asyncio.Task] = None
        self._pending_user: Optional[str] = None

    @classmethod
    def from_config(cls, config=ApplicationConfig) -> "ClientSessionAgent":
        http_client = httpx.AsyncClient(
            base_url=config.SESSION_SERVICE_URL,
            timeout=config.CLIENT_TIMEOUT_SECONDS,
        )
        cache = SessionCache(FileKeyValueStore(config.CLIENT_STORAGE_PATH))
        return cls(http_client, cache)

    @property
    def is_authenticated(self) -> bool:
        return self.state == AgentState.authenticated

    async def _call(self, action: str, **fields: Any) -> Dict[str, Any]:
        try:
            response = await self.http_client.post(self.endpoint, json={"action": action, **fields})
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise SessionAuthorityError(f"{action} failed: {exc}") from exc

    async def _settle_pending(self) -> None:
        """Wait for an in-flight background sign-in to finish"""
        if self._pending is not None and not self._pending.done():
            await self._pending

    def _forget(self) -> None:
        self.cache.clear()
        self.session = None
        self.state = AgentState.unauthenticated

    async def create_session(self, user_id: str) -> Optional[StoredSession]:
        """Sign this device in; any other device of the user is logged out."""
        self.state = AgentState.pending
        device_id = generate_device_id(self.user_agent, self.screen)
        try:
            data = await self._call(
                "create_session",
                userId=user_id,
                deviceId=device_id,
                userAgent=self.user_agent,
                ipAddress="",
            )
            session = StoredSession(
                session_token=data["sessionToken"],
                device_id=device_id,
                expires_at=data["expiresAt"],
            )
        except (SessionAuthorityError, KeyError) as exc:
            logger.error("Error creating session: %s", exc)
            self.state = AgentState.unauthenticated
            return None

        self.cache.save(session)
        self.session = session
        self.state = AgentState.authenticated
        return session

    async def validate_session(self) -> bool:
        """
        Confirm the cached session with the authority.

        An explicit rejection clears the cache. A transport failure only
        drops to unauthenticated and keeps the cache for a later retry.
        """
        stored = self.cache.load()
        if stored is None:
            self.session = None
            self.state = AgentState.unauthenticated
            return False

        self.state = AgentState.pending
        try:
            data = await self._call(
                "validate_session",
                sessionToken=stored.session_token,
                deviceId=stored.device_id,
            )
        except SessionAuthorityError as exc:
            logger.error("Error validating session: %s", exc)
            self.state = AgentState.unauthenticated
            return False

        if not data.get("valid"):
            logger.info("Session no longer valid: %s", data.get("reason", "unknown"))
            self._forget()
            return False

        self.session = stored
        self.state = AgentState.authenticated
        return True

    async def on_app_load(self, user_id: Optional[str]) -> bool:
        """Reconcile with the identity provider's view at startup."""
        if user_id is None:
            self._forget()
            return False
        return await self.validate_session()

    def on_signed_in(self, user_id: str) -> asyncio.Task:
        """
        Start session creation in the background and return immediately.

        A repeated event for the user already being signed in reuses the
        in-flight task; otherwise the new create runs after the previous one.
        """
        previous = self._pending
        if previous is not None and not previous.done() and self._pending_user == user_id:
            return previous

        self.state = AgentState.pending
        self._pending_user = user_id
        self._pending = asyncio.create_task(self._create_after(previous, user_id))
        return self._pending

    async def _create_after(
        self, previous: Optional[asyncio.Task], user_id: str
    ) -> Optional[StoredSession]:
        if previous is not None and not previous.done():
            await previous
        return await self.create_session(user_id)

    async def sign_out(
        self,
        user_id: str,
        identity_sign_out: Optional[Callable[[], Awaitable[Any]]] = None,
    ) -> None:
        """
        End the session here, then at the identity provider.

        The local cache is cleared even if either call fails.
        """
        # A sign-in still in flight must finish so its token is logged out too
        await self._settle_pending()
        stored = self.session or self.cache.load()
        try:
            if stored is not None:
                await self._call(
                    "logout",
                    userId=user_id,
                    sessionToken=stored.session_token,
                    deviceId=stored.device_id,
                    ipAddress="",
                )
        except SessionAuthorityError as exc:
            logger.error("Error ending session: %s", exc)

        try:
            if identity_sign_out is not None:
                await identity_sign_out()
        finally:
            self._forget()

    async def handle_auth_event(self, event: AuthEvent, user_id: Optional[str] = None) -> None:
        if event == AuthEvent.signed_in and user_id:
            self.on_signed_in(user_id)
        elif event == AuthEvent.signed_out:
            await self._settle_pending()
            self._forget()

    async def get_active_sessions(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            data = await self._call("get_active_sessions", userId=user_id)
        except SessionAuthorityError as exc:
            logger.error("Error getting active sessions: %s", exc)
            return []
        return data.get("sessions") or []

    async def aclose(self) -> None:
        await self._settle_pending()
        await self.http_client.aclose()
