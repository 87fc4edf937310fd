"""Unit tests for schemas/models (VerificationSession and OTP outcomes)."""

import pytest
from pydantic import ValidationError

from schemas.models.outcome import IssueResult, OtpOutcome, VerifyResult
from schemas.models.session import VerificationSession

NOW = 1_700_000_000.0


@pytest.fixture
def session():
    return VerificationSession.issue("919876543210", "042817", NOW, 60, 3)


class TestVerificationSession:
    def test_issue(self, session):
        assert session.phone_key == "919876543210"
        assert session.code == "042817"
        assert session.issued_at == NOW
        assert session.expires_at == NOW + 60
        assert session.attempts == 0
        assert session.max_attempts == 3

    def test_expiry_boundary(self, session):
        assert session.is_expired(NOW + 59.999) is False
        assert session.is_expired(NOW + 60) is True

    @pytest.mark.parametrize(
        "elapsed, remaining",
        [(0, 60), (0.5, 60), (59.1, 1), (60, 0), (120, 0)],
    )
    def test_remaining_seconds(self, session, elapsed, remaining):
        assert session.remaining_seconds(NOW + elapsed) == remaining

    def test_same_issuance(self, session):
        copy = session.model_copy(update={"attempts": 2})
        assert session.same_issuance(copy) is True

    def test_different_issuance(self, session):
        newer = VerificationSession.issue("919876543210", "042817", NOW + 1, 60, 3)
        assert session.same_issuance(newer) is False
        other_code = session.model_copy(update={"code": "111111"})
        assert session.same_issuance(other_code) is False

    def test_json_round_trip_keeps_leading_zero(self, session):
        restored = VerificationSession.from_json(session.to_json())
        assert restored == session
        assert restored.code == "042817"

    def test_negative_attempts_rejected(self):
        with pytest.raises(ValidationError):
            VerificationSession(
                phone_key="1", code="1", issued_at=NOW, expires_at=NOW, attempts=-1
            )

    def test_zero_max_attempts_rejected(self):
        with pytest.raises(ValidationError):
            VerificationSession(
                phone_key="1", code="1", issued_at=NOW, expires_at=NOW, max_attempts=0
            )

    def test_from_json_rejects_garbage(self):
        with pytest.raises(ValidationError):
            VerificationSession.from_json("{not json")


class TestOutcome:
    def test_values_are_snake_case_strings(self):
        assert OtpOutcome.ISSUED == "issued"
        assert OtpOutcome.ATTEMPTS_EXHAUSTED.value == "attempts_exhausted"

    def test_issue_result_defaults(self):
        r = IssueResult(accepted=False, outcome=OtpOutcome.DISPATCH_FAILED, message="m")
        assert r.expires_in_seconds is None
        assert r.code is None

    def test_verify_result_is_frozen(self):
        r = VerifyResult(accepted=True, outcome=OtpOutcome.VERIFIED, message="ok")
        with pytest.raises(AttributeError):
            r.accepted = False
