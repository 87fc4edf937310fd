"""
OTP issuance and verification.

OtpService drives one verification session per normalized phone key:

    Unrequested -> Active -> Verified | Expired | Exhausted

The session store is the only copy of a session. Every operation re-reads it
under the store's per-key lock, so two concurrent verify calls for the same
phone can never both get past the attempt ceiling. The lock is released while
the code is being delivered; if delivery fails or the call is cancelled the
session is rolled back so a retry is not throttled by a code nobody received.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from config import OtpSettings
from infrastructure.delivery.chain import DeliveryChain
from infrastructure.session_store.protocol import SessionStore
from schemas.models.outcome import IssueResult, OtpOutcome, VerifyResult
from schemas.models.session import VerificationSession
from shared.crypto import codes_match
from shared.generators import generate_otp_code
from shared.logging import get_logger
from shared.phone import is_valid_phone, mask_phone, normalize_phone

log = get_logger(__name__)

MSG_INVALID_PHONE = "Invalid phone number format"
MSG_SENT = "OTP sent successfully"
MSG_DISPATCH_FAILED = "Failed to send OTP. Please try again."
MSG_NO_SESSION = "OTP expired or not found. Please request a new OTP."
MSG_EXHAUSTED = "Maximum verification attempts exceeded. Please request a new OTP."
MSG_VERIFIED = "Phone number verified successfully!"


class OtpService:
    def __init__(
        self,
        store: SessionStore,
        delivery: DeliveryChain,
        *,
        code_length: int = 6,
        ttl_seconds: int = 300,
        max_attempts: int = 3,
        min_phone_digits: int = 10,
        expose_code: bool = False,
        clock: Callable[[], float] = time.time,
        code_generator: Callable[[int], str] = generate_otp_code,
    ) -> None:
        self._store = store
        self._delivery = delivery
        self.code_length = code_length
        self.ttl_seconds = ttl_seconds
        self.max_attempts = max_attempts
        self.min_phone_digits = min_phone_digits
        self.expose_code = expose_code
        self._clock = clock
        self._generate = code_generator

    @classmethod
    def from_settings(
        cls,
        settings: OtpSettings,
        store: SessionStore,
        delivery: DeliveryChain,
        clock: Callable[[], float] = time.time,
    ) -> "OtpService":
        return cls(
            store,
            delivery,
            code_length=settings.otp_code_length,
            ttl_seconds=settings.otp_ttl_seconds,
            max_attempts=settings.otp_max_attempts,
            min_phone_digits=settings.otp_min_phone_digits,
            expose_code=bool(settings.otp_expose_code),
            clock=clock,
        )

    def _phone_key(self, phone: str) -> Optional[str]:
        phone_key = normalize_phone(phone)
        if not is_valid_phone(phone_key, self.min_phone_digits):
            return None
        return phone_key

    # ── Issuance ─────────────────────────────────────────────────────────────

    async def issue(self, phone: str) -> IssueResult:
        """Issue a new code for *phone* and hand it to the delivery chain."""
        phone_key = self._phone_key(phone)
        if phone_key is None:
            log.info("otp_issue_rejected", reason="invalid_phone_format")
            return IssueResult(
                accepted=False,
                outcome=OtpOutcome.INVALID_PHONE_FORMAT,
                message=MSG_INVALID_PHONE,
            )

        async with self._store.locked(phone_key):
            existing = await self._store.get(phone_key)
            now = self._clock()
            if existing is not None:
                wait = existing.remaining_seconds(now)
                log.info(
                    "otp_issue_throttled",
                    phone=mask_phone(phone_key),
                    retry_after=wait,
                )
                return IssueResult(
                    accepted=False,
                    outcome=OtpOutcome.ALREADY_ACTIVE,
                    message=(
                        f"OTP already sent. Please wait {wait} seconds "
                        "before requesting again."
                    ),
                    expires_in_seconds=wait,
                )

            session = VerificationSession.issue(
                phone_key=phone_key,
                code=self._generate(self.code_length),
                now=now,
                ttl_seconds=self.ttl_seconds,
                max_attempts=self.max_attempts,
            )
            await self._store.put(phone_key, session)

        try:
            delivered = await self._delivery.dispatch(phone_key, session.code)
        except asyncio.CancelledError:
            log.warning("otp_issue_cancelled", phone=mask_phone(phone_key))
            await self._rollback(session)
            raise

        if not delivered:
            await self._rollback(session)
            log.error("otp_dispatch_failed", phone=mask_phone(phone_key))
            return IssueResult(
                accepted=False,
                outcome=OtpOutcome.DISPATCH_FAILED,
                message=MSG_DISPATCH_FAILED,
            )

        log.info(
            "otp_issued",
            phone=mask_phone(phone_key),
            ttl_seconds=self.ttl_seconds,
            code_exposed=self.expose_code,
        )
        return IssueResult(
            accepted=True,
            outcome=OtpOutcome.ISSUED,
            message=MSG_SENT,
            expires_in_seconds=self.ttl_seconds,
            code=session.code if self.expose_code else None,
        )

    async def _rollback(self, session: VerificationSession) -> None:
        # Only remove the session this call created; a newer one is left alone
        async with self._store.locked(session.phone_key):
            current = await self._store.get(session.phone_key)
            if current is not None and current.same_issuance(session):
                await self._store.clear(session.phone_key)
                log.info("otp_session_rolled_back", phone=mask_phone(session.phone_key))

    # ── Verification ─────────────────────────────────────────────────────────

    async def verify(self, phone: str, submitted_code: str) -> VerifyResult:
        """Check *submitted_code* against the live session for *phone*."""
        phone_key = self._phone_key(phone)
        if phone_key is None:
            return VerifyResult(
                accepted=False,
                outcome=OtpOutcome.INVALID_PHONE_FORMAT,
                message=MSG_INVALID_PHONE,
            )

        async with self._store.locked(phone_key):
            session = await self._store.get(phone_key)
            if session is None:
                log.info("otp_verify_failed", phone=mask_phone(phone_key), reason="no_session")
                return VerifyResult(
                    accepted=False,
                    outcome=OtpOutcome.NO_ACTIVE_SESSION,
                    message=MSG_NO_SESSION,
                )

            if session.attempts >= session.max_attempts:
                return await self._exhausted(phone_key, MSG_EXHAUSTED)

            session.attempts += 1
            await self._store.put(phone_key, session)

            if session.attempts > session.max_attempts:
                return await self._exhausted(phone_key, MSG_EXHAUSTED)

            if codes_match(session.code, (submitted_code or "").strip()):
                await self._store.clear(phone_key)
                log.info(
                    "otp_verified",
                    phone=mask_phone(phone_key),
                    attempts=session.attempts,
                )
                return VerifyResult(
                    accepted=True,
                    outcome=OtpOutcome.VERIFIED,
                    message=MSG_VERIFIED,
                )

            remaining = session.max_attempts - session.attempts
            if remaining == 0:
                return await self._exhausted(
                    phone_key,
                    "Invalid OTP. Maximum attempts exceeded. Please request a new OTP.",
                )

            log.info(
                "otp_verify_failed",
                phone=mask_phone(phone_key),
                reason="invalid_code",
                attempts_remaining=remaining,
            )
            return VerifyResult(
                accepted=False,
                outcome=OtpOutcome.INVALID_CODE,
                message=f"Invalid OTP. {remaining} attempt(s) remaining.",
                attempts_remaining=remaining,
            )

    async def _exhausted(self, phone_key: str, message: str) -> VerifyResult:
        await self._store.clear(phone_key)
        log.warning("otp_attempts_exhausted", phone=mask_phone(phone_key))
        return VerifyResult(
            accepted=False,
            outcome=OtpOutcome.ATTEMPTS_EXHAUSTED,
            message=message,
            attempts_remaining=0,
        )

    # ── Read helpers ─────────────────────────────────────────────────────────

    async def remaining_ttl(self, phone: str) -> int:
        """Seconds until the live session for *phone* expires; 0 if none."""
        phone_key = self._phone_key(phone)
        if phone_key is None:
            return 0
        session = await self._store.get(phone_key)
        if session is None:
            return 0
        return session.remaining_seconds(self._clock())

    async def has_active_session(self, phone: str) -> bool:
        phone_key = self._phone_key(phone)
        if phone_key is None:
            return False
        session = await self._store.get(phone_key)
        return session is not None and not session.is_expired(self._clock())

    async def clear(self, phone: str) -> None:
        """Drop any session for *phone*. Idempotent."""
        phone_key = self._phone_key(phone)
        if phone_key is None:
            return
        async with self._store.locked(phone_key):
            await self._store.clear(phone_key)
        log.info("otp_session_cleared", phone=mask_phone(phone_key))
