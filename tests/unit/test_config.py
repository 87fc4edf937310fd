"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppSettings,
    DeliverySettings,
    LoggingSettings,
    OtpSettings,
    RedisSettings,
)


# ---------------------------------------------------------------------------
# OtpSettings
# ---------------------------------------------------------------------------


class TestOtpSettings:
    def test_production_defaults(self, monkeypatch):
        monkeypatch.delenv("OTP_MODE", raising=False)
        s = OtpSettings()
        assert s.otp_mode == "production"
        assert s.otp_code_length == 6
        assert s.otp_ttl_seconds == 300
        assert s.otp_max_attempts == 3
        assert s.otp_expose_code is False
        assert s.is_demo is False

    def test_demo_mode_defaults(self, monkeypatch):
        monkeypatch.setenv("OTP_MODE", "DEMO")
        s = OtpSettings()
        assert s.otp_mode == "demo"
        assert s.otp_ttl_seconds == 60
        assert s.otp_expose_code is True

    def test_explicit_overrides_win(self, monkeypatch):
        monkeypatch.setenv("OTP_MODE", "demo")
        monkeypatch.setenv("OTP_TTL_SECONDS", "120")
        monkeypatch.setenv("OTP_EXPOSE_CODE", "false")
        s = OtpSettings()
        assert s.otp_ttl_seconds == 120
        assert s.otp_expose_code is False

    def test_unknown_mode_rejected(self, monkeypatch):
        monkeypatch.setenv("OTP_MODE", "staging")
        with pytest.raises(PydanticValidationError):
            OtpSettings()

    @pytest.mark.parametrize(
        "var", ["OTP_CODE_LENGTH", "OTP_MAX_ATTEMPTS", "OTP_TTL_SECONDS"]
    )
    def test_non_positive_values_rejected(self, monkeypatch, var):
        monkeypatch.setenv(var, "0")
        with pytest.raises(PydanticValidationError):
            OtpSettings()


# ---------------------------------------------------------------------------
# DeliverySettings
# ---------------------------------------------------------------------------


class TestDeliverySettings:
    def test_default_order_is_console(self, monkeypatch):
        monkeypatch.delenv("DELIVERY_BACKEND_ORDER", raising=False)
        assert DeliverySettings().delivery_backend_order == ["console"]

    def test_comma_separated_order(self, monkeypatch):
        monkeypatch.setenv("DELIVERY_BACKEND_ORDER", "Twilio, msg91 ,console")
        assert DeliverySettings().delivery_backend_order == [
            "twilio",
            "msg91",
            "console",
        ]

    def test_json_list_order(self, monkeypatch):
        monkeypatch.setenv("DELIVERY_BACKEND_ORDER", '["msg91", "http"]')
        assert DeliverySettings().delivery_backend_order == ["msg91", "http"]

    def test_timeout_loaded(self, monkeypatch):
        monkeypatch.setenv("DELIVERY_TIMEOUT_SECONDS", "2.5")
        assert DeliverySettings().delivery_timeout_seconds == 2.5

    def test_credentials_default_empty(self, monkeypatch):
        for var in ("TWILIO_ACCOUNT_SID", "MSG91_AUTH_KEY", "SMS_HTTP_URL"):
            monkeypatch.delenv(var, raising=False)
        s = DeliverySettings()
        assert s.twilio_account_sid == ""
        assert s.msg91_auth_key == ""
        assert s.sms_http_url == ""
        assert s.msg91_sender_id == "OTPGTE"


# ---------------------------------------------------------------------------
# RedisSettings
# ---------------------------------------------------------------------------


class TestRedisSettings:
    def test_redis_uri_optional(self, monkeypatch):
        monkeypatch.delenv("REDIS_URI", raising=False)
        assert RedisSettings().redis_uri is None

    def test_redis_uri_loaded(self, monkeypatch):
        monkeypatch.setenv("REDIS_URI", "redis://localhost:6379")
        assert RedisSettings().redis_uri == "redis://localhost:6379"

    def test_default_lock_timeout(self, monkeypatch):
        monkeypatch.delenv("REDIS_LOCK_TIMEOUT_SECONDS", raising=False)
        assert RedisSettings().redis_lock_timeout_seconds == 5.0


# ---------------------------------------------------------------------------
# LoggingSettings
# ---------------------------------------------------------------------------


class TestLoggingSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        s = LoggingSettings()
        assert s.log_level == "INFO"
        assert s.log_format == "console"


# ---------------------------------------------------------------------------
# AppSettings
# ---------------------------------------------------------------------------


class TestAppSettings:
    def test_sub_configs_populated(self):
        s = AppSettings()
        assert isinstance(s.otp, OtpSettings)
        assert isinstance(s.delivery, DeliverySettings)
        assert isinstance(s.redis, RedisSettings)
        assert s.logging is not None
        assert s.sentry is not None

    def test_sub_configs_read_env(self, monkeypatch):
        monkeypatch.setenv("OTP_MODE", "demo")
        monkeypatch.setenv("DELIVERY_BACKEND_ORDER", "http,console")
        s = AppSettings()
        assert s.otp.is_demo is True
        assert s.delivery.delivery_backend_order == ["http", "console"]

    def test_is_production(self, monkeypatch):
        monkeypatch.setenv("ENV", "production")
        assert AppSettings().is_production is True

    def test_is_not_production_by_default(self, monkeypatch):
        monkeypatch.delenv("ENV", raising=False)
        assert AppSettings().is_production is False

    def test_explicit_sub_config_kept(self):
        otp = OtpSettings(otp_mode="demo")
        assert AppSettings(otp=otp).otp.is_demo is True
