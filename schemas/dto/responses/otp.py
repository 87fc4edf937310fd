"""
Response DTOs for OTP endpoints.

SendOtpResponse     POST /otp/send
VerifyOtpResponse   POST /otp/verify
OtpStatusResponse   GET /otp/status
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.models.outcome import IssueResult, OtpOutcome, VerifyResult


class SendOtpResponse(BaseModel):
    """Response body for POST /otp/send."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    outcome: OtpOutcome
    message: str
    expires_in_seconds: Optional[int] = None
    # Present only when the service runs in demo mode
    code: Optional[str] = None

    @classmethod
    def from_result(cls, result: IssueResult) -> "SendOtpResponse":
        return cls(
            success=result.accepted,
            outcome=result.outcome,
            message=result.message,
            expires_in_seconds=result.expires_in_seconds,
            code=result.code,
        )


class VerifyOtpResponse(BaseModel):
    """Response body for POST /otp/verify."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    outcome: OtpOutcome
    message: str
    attempts_remaining: Optional[int] = None

    @classmethod
    def from_result(cls, result: VerifyResult) -> "VerifyOtpResponse":
        return cls(
            success=result.accepted,
            outcome=result.outcome,
            message=result.message,
            attempts_remaining=result.attempts_remaining,
        )


class OtpStatusResponse(BaseModel):
    """Response body for GET /otp/status."""

    model_config = ConfigDict(populate_by_name=True)

    active: bool
    expires_in_seconds: int
