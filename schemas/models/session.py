"""
VerificationSession: the ephemeral record binding a phone to its active code.

Timestamps are epoch seconds (float) so the record serialises to plain JSON
for the Redis store without timezone handling.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


class VerificationSession(BaseModel):
    """
    One issued code for one normalized phone key.

    attempts only ever grows; the session is destroyed rather than reset.
    """

    model_config = ConfigDict(populate_by_name=True)

    phone_key: str
    code: str
    issued_at: float
    expires_at: float
    attempts: int = Field(default=0, ge=0)
    max_attempts: int = Field(default=3, ge=1)

    @classmethod
    def issue(
        cls,
        phone_key: str,
        code: str,
        now: float,
        ttl_seconds: int,
        max_attempts: int,
    ) -> "VerificationSession":
        return cls(
            phone_key=phone_key,
            code=code,
            issued_at=now,
            expires_at=now + ttl_seconds,
            attempts=0,
            max_attempts=max_attempts,
        )

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def remaining_seconds(self, now: float) -> int:
        """Whole seconds until expiry, rounded up; 0 once expired."""
        return max(0, math.ceil(self.expires_at - now))

    def same_issuance(self, other: "VerificationSession") -> bool:
        return (
            self.phone_key == other.phone_key
            and self.code == other.code
            and self.issued_at == other.issued_at
        )

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str) -> "VerificationSession":
        return cls.model_validate_json(raw)
