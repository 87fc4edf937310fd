"""In-process session store.

Sessions live in a plain dict; each phone key gets its own asyncio.Lock.
Locks are held in a WeakValueDictionary so a key's lock disappears once no
coroutine is holding or waiting on it.
"""

from __future__ import annotations

import asyncio
import time
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from schemas.models.session import VerificationSession
from shared.logging import get_logger

log = get_logger(__name__)


class InMemorySessionStore:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._sessions: dict[str, VerificationSession] = {}
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._clock = clock

    async def get(self, phone_key: str) -> Optional[VerificationSession]:
        session = self._sessions.get(phone_key)
        if session is None:
            return None
        if session.is_expired(self._clock()):
            self._sessions.pop(phone_key, None)
            log.debug("otp_session_expired", store="memory")
            return None
        # Callers mutate what they get back; hand out a copy
        return session.model_copy()

    async def put(self, phone_key: str, session: VerificationSession) -> None:
        self._sessions[phone_key] = session.model_copy()

    async def clear(self, phone_key: str) -> None:
        self._sessions.pop(phone_key, None)

    @asynccontextmanager
    async def locked(self, phone_key: str) -> AsyncIterator[None]:
        lock = self._locks.get(phone_key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[phone_key] = lock
        async with lock:
            yield
