"""
Results returned by OtpService.

Every issue/verify call ends in exactly one OtpOutcome. Failures are values,
not exceptions, so callers can branch on ``outcome`` without try/except.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OtpOutcome(str, Enum):
    ISSUED = "issued"
    VERIFIED = "verified"
    INVALID_PHONE_FORMAT = "invalid_phone_format"
    ALREADY_ACTIVE = "already_active"
    DISPATCH_FAILED = "dispatch_failed"
    NO_ACTIVE_SESSION = "no_active_session"
    INVALID_CODE = "invalid_code"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"


@dataclass(frozen=True)
class IssueResult:
    accepted: bool
    outcome: OtpOutcome
    message: str
    expires_in_seconds: Optional[int] = None
    # Only populated when the service runs with expose_code enabled
    code: Optional[str] = None


@dataclass(frozen=True)
class VerifyResult:
    accepted: bool
    outcome: OtpOutcome
    message: str
    attempts_remaining: Optional[int] = None
