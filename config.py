"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

OTP mode: "demo" shortens the default TTL to 60 seconds and returns the issued
code in the send response; "production" keeps the code on the delivery path
only. Both can be overridden explicitly (OTP_TTL_SECONDS, OTP_EXPOSE_CODE).
"""

from __future__ import annotations

import json
from typing import Annotated, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEMO_TTL_SECONDS = 60
PRODUCTION_TTL_SECONDS = 300


class OtpSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    otp_mode: str = "production"  # "demo" or "production"
    otp_code_length: int = 6
    otp_ttl_seconds: Optional[int] = None
    otp_max_attempts: int = 3
    otp_min_phone_digits: int = 10

    # None → follow otp_mode (exposed in demo, hidden in production)
    otp_expose_code: Optional[bool] = None

    @field_validator("otp_mode")
    @classmethod
    def _check_mode(cls, value: str) -> str:
        value = value.lower()
        if value not in ("demo", "production"):
            raise ValueError("otp_mode must be 'demo' or 'production'")
        return value

    @field_validator("otp_code_length", "otp_max_attempts")
    @classmethod
    def _check_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @model_validator(mode="after")
    def _apply_mode_defaults(self) -> "OtpSettings":
        if self.otp_ttl_seconds is None:
            self.otp_ttl_seconds = (
                DEMO_TTL_SECONDS if self.is_demo else PRODUCTION_TTL_SECONDS
            )
        if self.otp_ttl_seconds < 1:
            raise ValueError("otp_ttl_seconds must be at least 1")
        if self.otp_expose_code is None:
            self.otp_expose_code = self.is_demo
        return self

    @property
    def is_demo(self) -> bool:
        return self.otp_mode == "demo"


class DeliverySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Backend identifiers tried in this order: console, twilio, msg91, http
    delivery_backend_order: Annotated[list[str], NoDecode] = ["console"]
    delivery_timeout_seconds: float = 5.0
    delivery_console_fallback: bool = False

    sms_app_name: str = "otpgate"
    sms_template: str = (
        "Your {app_name} verification code is {code}. "
        "Valid for {ttl_minutes} minutes."
    )

    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_from_number: str = ""

    msg91_auth_key: str = ""
    msg91_template_id: str = ""
    msg91_sender_id: str = "OTPGTE"

    # Generic JSON-over-HTTP gateway
    sms_http_url: str = ""
    sms_http_token: str = ""
    sms_http_sender: str = ""

    @field_validator("delivery_backend_order", mode="before")
    @classmethod
    def _split_order(cls, value):
        # Accept "twilio,msg91" as well as a JSON list
        if isinstance(value, str):
            if value.lstrip().startswith("["):
                return json.loads(value)
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("delivery_backend_order")
    @classmethod
    def _lower_order(cls, value: list[str]) -> list[str]:
        return [name.lower() for name in value]


class RedisSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Optional; without Redis sessions live in process memory
    redis_uri: Optional[str] = None
    redis_lock_timeout_seconds: float = 5.0


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "otpgate"

    cors_origins: list[str] = ["*"]

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    otp: Optional[OtpSettings] = None
    delivery: Optional[DeliverySettings] = None
    redis: Optional[RedisSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.otp is None:
            self.otp = OtpSettings()
        if self.delivery is None:
            self.delivery = DeliverySettings()
        if self.redis is None:
            self.redis = RedisSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
