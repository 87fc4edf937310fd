"""Redis-backed session store.

Each session is stored as JSON (not pickle) under ``otp_session:<phone_key>``
with a Redis expiry equal to the session's remaining lifetime. The Redis
expiry only reclaims memory; get() still compares expires_at against the
clock so a session is never observed live after its deadline.

Per-key atomicity uses a redis-py Lock on ``otp_lock:<phone_key>``, which also
serialises requests handled by different app instances.
"""

from __future__ import annotations

import math
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

import redis.asyncio as aioredis
from pydantic import ValidationError as PydanticValidationError
from redis.exceptions import LockError, RedisError

from errors import ServiceUnavailableError
from schemas.models.session import VerificationSession
from shared.logging import get_logger

log = get_logger(__name__)


class RedisSessionStore:
    def __init__(
        self,
        redis_client: aioredis.Redis,
        lock_timeout_seconds: float = 5.0,
        clock: Callable[[], float] = time.time,
        prefix: str = "otp",
    ) -> None:
        self._redis = redis_client
        self.lock_timeout_seconds = lock_timeout_seconds
        self._clock = clock
        self._prefix = prefix

    def _key(self, phone_key: str) -> str:
        return f"{self._prefix}_session:{phone_key}"

    def _lock_key(self, phone_key: str) -> str:
        return f"{self._prefix}_lock:{phone_key}"

    async def get(self, phone_key: str) -> Optional[VerificationSession]:
        try:
            raw = await self._redis.get(self._key(phone_key))
        except RedisError as e:
            log.error("otp_session_get_error", error=str(e), error_type=type(e).__name__)
            raise ServiceUnavailableError("Session store unavailable") from e
        if raw is None:
            return None

        try:
            session = VerificationSession.from_json(raw)
        except PydanticValidationError:
            log.warning("otp_session_corrupt", redis_key=self._key(phone_key))
            await self.clear(phone_key)
            return None

        if session.is_expired(self._clock()):
            await self.clear(phone_key)
            return None
        return session

    async def put(self, phone_key: str, session: VerificationSession) -> None:
        ttl_ms = math.ceil((session.expires_at - self._clock()) * 1000)
        if ttl_ms <= 0:
            await self.clear(phone_key)
            return
        try:
            await self._redis.set(self._key(phone_key), session.to_json(), px=ttl_ms)
        except RedisError as e:
            log.error("otp_session_put_error", error=str(e), error_type=type(e).__name__)
            raise ServiceUnavailableError("Session store unavailable") from e

    async def clear(self, phone_key: str) -> None:
        try:
            await self._redis.delete(self._key(phone_key))
        except RedisError as e:
            log.error(
                "otp_session_clear_error", error=str(e), error_type=type(e).__name__
            )
            raise ServiceUnavailableError("Session store unavailable") from e

    @asynccontextmanager
    async def locked(self, phone_key: str) -> AsyncIterator[None]:
        lock = self._redis.lock(
            self._lock_key(phone_key),
            timeout=self.lock_timeout_seconds,
            blocking_timeout=self.lock_timeout_seconds,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            log.error("otp_lock_error", error=str(e), error_type=type(e).__name__)
            raise ServiceUnavailableError("Session store unavailable") from e
        if not acquired:
            log.warning("otp_lock_contention", redis_key=self._lock_key(phone_key))
            raise ServiceUnavailableError("Session is busy, please retry")
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # Lock expired while held; the next holder already owns it
                log.warning("otp_lock_expired", redis_key=self._lock_key(phone_key))
