"""
OTP endpoints.

POST   /otp/send     issue a code and deliver it by SMS
POST   /otp/verify   check a submitted code
GET    /otp/status   is a code live for this phone, and for how long
DELETE /otp/session  drop the live code (e.g. user changed their number)

The service reports every outcome as a value; this module only decides the
HTTP status for each one.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from dependencies import get_otp_service
from schemas.dto.requests.otp import SendOtpRequest, VerifyOtpRequest
from schemas.dto.responses.common import ErrorResponse
from schemas.dto.responses.otp import (
    OtpStatusResponse,
    SendOtpResponse,
    VerifyOtpResponse,
)
from schemas.models.outcome import OtpOutcome
from services.otp_service import OtpService

router = APIRouter(prefix="/otp", tags=["otp"])

# Store outages surface as AppError bodies rather than OTP outcomes
STORE_ERRORS = {503: {"model": ErrorResponse}}

OUTCOME_STATUS: dict[OtpOutcome, int] = {
    OtpOutcome.ISSUED: 200,
    OtpOutcome.VERIFIED: 200,
    OtpOutcome.INVALID_PHONE_FORMAT: 400,
    OtpOutcome.INVALID_CODE: 400,
    OtpOutcome.NO_ACTIVE_SESSION: 404,
    OtpOutcome.ALREADY_ACTIVE: 429,
    OtpOutcome.ATTEMPTS_EXHAUSTED: 429,
    OtpOutcome.DISPATCH_FAILED: 503,
}


@router.post("/send", response_model=SendOtpResponse, responses=STORE_ERRORS)
async def send_otp(
    body: SendOtpRequest, service: OtpService = Depends(get_otp_service)
) -> JSONResponse:
    result = await service.issue(body.phone)
    headers: dict[str, str] = {}
    if result.outcome is OtpOutcome.ALREADY_ACTIVE and result.expires_in_seconds:
        headers["Retry-After"] = str(result.expires_in_seconds)
    return JSONResponse(
        status_code=OUTCOME_STATUS[result.outcome],
        content=SendOtpResponse.from_result(result).model_dump(
            mode="json", exclude_none=True
        ),
        headers=headers,
    )


@router.post("/verify", response_model=VerifyOtpResponse, responses=STORE_ERRORS)
async def verify_otp(
    body: VerifyOtpRequest, service: OtpService = Depends(get_otp_service)
) -> JSONResponse:
    result = await service.verify(body.phone, body.code)
    return JSONResponse(
        status_code=OUTCOME_STATUS[result.outcome],
        content=VerifyOtpResponse.from_result(result).model_dump(
            mode="json", exclude_none=True
        ),
    )


@router.get("/status", response_model=OtpStatusResponse)
async def otp_status(
    phone: str = Query(min_length=1, max_length=32),
    service: OtpService = Depends(get_otp_service),
) -> OtpStatusResponse:
    remaining = await service.remaining_ttl(phone)
    return OtpStatusResponse(active=remaining > 0, expires_in_seconds=remaining)


@router.delete("/session", status_code=204)
async def clear_otp_session(
    phone: str = Query(min_length=1, max_length=32),
    service: OtpService = Depends(get_otp_service),
) -> Response:
    await service.clear(phone)
    return Response(status_code=204)
