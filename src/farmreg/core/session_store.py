"""In-memory USSD session storage with per-session locking."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

from farmreg.core.logging import get_logger
from farmreg.models.session import UssdSession
from farmreg.utils.datetime import now_utc

logger = get_logger(__name__)


class _KeyedLock:
    """asyncio.Lock per key, dropped once no coroutine holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class SessionStore:
    """
    Session id -> UssdSession map shared by request handlers and the sweeper.

    Map operations never await, so each one is atomic on the event loop.
    Records are copied on the way in and out; callers mutate their copy and
    hand it back through `save`. Requests for the same session id must run
    inside `lock(session_id)` so stage transitions cannot interleave. Delete
    never takes that lock, so the sweeper cannot deadlock against a request.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, UssdSession] = {}
        self._locks = _KeyedLock()

    def lock(self, session_id: str):
        """Async context manager serializing work on one session id."""
        return self._locks.hold(session_id)

    def get_or_create(self, session_id: str, end_user_id: str) -> UssdSession:
        """Return the live session (bumping its activity time) or start a new one."""
        now = now_utc()
        session = self._sessions.get(session_id)
        if session is None:
            session = UssdSession(
                session_id=session_id,
                end_user_id=end_user_id,
                created_at=now,
                last_activity_at=now,
            )
            logger.info("session.created", session_id=session_id, end_user_id=end_user_id)
        else:
            session.touch(now)
        self._sessions[session_id] = session
        return session.model_copy(deep=True)

    def get(self, session_id: str) -> UssdSession | None:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    def save(self, session: UssdSession) -> None:
        """Replace the stored record. Recreates the entry if it was deleted meanwhile."""
        self._sessions[session.session_id] = session.model_copy(deep=True)

    def delete(self, session_id: str) -> bool:
        """Remove a session. Returns False (and does nothing) if it was already gone."""
        return self._sessions.pop(session_id, None) is not None

    def delete_if_idle(self, session_id: str, cutoff: datetime) -> bool:
        """Delete only if the stored record is still older than `cutoff`."""
        session = self._sessions.get(session_id)
        if session is None or session.last_activity_at >= cutoff:
            return False
        del self._sessions[session_id]
        return True

    def snapshot(self) -> list[UssdSession]:
        """Copies of every live session, oldest activity first."""
        sessions = [s.model_copy(deep=True) for s in self._sessions.values()]
        return sorted(sessions, key=lambda s: s.last_activity_at)

    def count(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
