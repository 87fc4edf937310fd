"""SessionStore protocol: the OTP service depends on this, not the concrete store."""

from typing import AsyncContextManager, Optional, Protocol

from schemas.models.session import VerificationSession


class SessionStore(Protocol):
    async def get(self, phone_key: str) -> Optional[VerificationSession]:
        """Return the live session, or None. Expired sessions are removed."""
        ...

    async def put(self, phone_key: str, session: VerificationSession) -> None: ...

    async def clear(self, phone_key: str) -> None: ...

    def locked(self, phone_key: str) -> AsyncContextManager[None]:
        """Per-key mutual exclusion for read-check-write sequences."""
        ...
