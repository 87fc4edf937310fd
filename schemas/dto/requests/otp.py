"""
Request DTOs for OTP endpoints.

SendOtpRequest    POST /otp/send
VerifyOtpRequest  POST /otp/verify
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SendOtpRequest(BaseModel):
    """Request body for POST /otp/send."""

    model_config = ConfigDict(populate_by_name=True)

    phone: str = Field(min_length=1, max_length=32)


class VerifyOtpRequest(BaseModel):
    """Request body for POST /otp/verify.

    ``code`` is the numeric OTP delivered by SMS.
    """

    model_config = ConfigDict(populate_by_name=True)

    phone: str = Field(min_length=1, max_length=32)
    code: str = Field(min_length=1, max_length=12)
