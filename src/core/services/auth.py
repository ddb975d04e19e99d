"""Mock authentication and session lifecycle.

States: anonymous -> authenticated -> (refreshed)* -> anonymous.

The token is a JWT-shaped string with an unsigned payload `{sub, iat, exp}`
(epoch milliseconds). Nothing verifies it; it only carries the expiry that
drives the silent refresh.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import time
from typing import Callable

from pydantic import ValidationError

from adapters.session_store import LocalStorage
from core.config import AppSettings
from core.domain.errors import AuthError
from core.domain.models import Session

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


def _b64(data: str) -> str:
    return base64.b64encode(data.encode("utf-8")).decode("ascii")


def generate_mock_token(username: str, *, issued_at: int, ttl_ms: int) -> str:
    header = _b64(json.dumps({"alg": "HS256", "typ": "JWT"}))
    payload = _b64(json.dumps({"sub": username, "exp": issued_at + ttl_ms, "iat": issued_at}))
    signature = _b64("mock-signature")
    return f"{header}.{payload}.{signature}"


def get_token_expiry(token: str) -> int:
    """Expiry (epoch ms) read from the token payload; 0 when unparseable."""

    try:
        payload = token.split(".")[1]
        decoded = json.loads(base64.b64decode(payload).decode("utf-8"))
        return int(decoded["exp"])
    except (IndexError, KeyError, TypeError, ValueError):
        return 0


class AuthService:
    """Holds the single active session and keeps it in durable storage."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        storage: LocalStorage | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self._settings = settings or AppSettings()
        self._storage = storage or LocalStorage(self._settings.session_path)
        self._clock = clock
        self._session: Session | None = self._restore()

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def _ttl_ms(self) -> int:
        return self._settings.token_ttl_seconds * 1000

    def _restore(self) -> Session | None:
        key = self._settings.session_key
        stored = self._storage.get_item(key)
        if not stored:
            return None
        try:
            session = Session.model_validate_json(stored)
        except ValidationError:
            logger.debug("Discarding corrupt stored session")
            self._storage.remove_item(key)
            return None
        if get_token_expiry(session.token) > self._clock():
            return session
        return None

    def _issue(self, username: str) -> Session:
        issued_at = self._clock()
        token = generate_mock_token(username, issued_at=issued_at, ttl_ms=self._ttl_ms)
        return Session(
            username=username,
            token=token,
            issued_at=issued_at,
            expires_at=get_token_expiry(token),
        )

    def _persist(self, session: Session) -> None:
        self._session = session
        self._storage.set_item(
            self._settings.session_key,
            session.model_dump_json(by_alias=True),
        )

    def login(self, username: str, password: str) -> Session:
        """Validate against the fixed pair and persist a fresh session.

        Raises `AuthError` on mismatch; the current state is left unchanged.
        """

        if username != self._settings.mock_username or password != self._settings.mock_password:
            raise AuthError("Invalid credentials")
        session = self._issue(username)
        self._persist(session)
        logger.info("Logged in as %s", username)
        return session

    def logout(self) -> None:
        self._session = None
        self._storage.remove_item(self._settings.session_key)

    def refresh_if_needed(self) -> bool:
        """Re-issue the token when its remaining validity is under the threshold.

        An already expired token is not refreshed. Returns True when a new
        token was issued.
        """

        session = self._session
        if session is None:
            return False
        remaining = get_token_expiry(session.token) - self._clock()
        threshold = self._settings.token_refresh_threshold_seconds * 1000
        if not 0 < remaining < threshold:
            return False
        self._persist(self._issue(session.username))
        logger.info("Token silently refreshed")
        return True


class TokenRefresher:
    """Background task: checks the token now, then on a fixed interval."""

    def __init__(self, auth: AuthService, *, interval_seconds: float) -> None:
        self._auth = auth
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while self._auth.is_authenticated:
            self._auth.refresh_if_needed()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        if self.running:
            return
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
