"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppSettings
from errors import register_error_handlers
from infrastructure.delivery.factory import build_delivery_chain
from infrastructure.http_client import HttpClient
from infrastructure.session_store.memory import InMemorySessionStore
from infrastructure.session_store.redis_client import create_redis_client
from infrastructure.session_store.redis_store import RedisSessionStore
from routes.health_routes import router as health_router
from routes.otp_routes import router as otp_router
from services.otp_service import OtpService
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        app.state.settings = settings

        http_client = HttpClient(timeout=settings.delivery.delivery_timeout_seconds)
        redis_client = None
        # Clients opened here are closed even when wiring fails part-way
        try:
            delivery = build_delivery_chain(
                settings.delivery, http_client, settings.otp.otp_ttl_seconds
            )
            app.state.http_client = http_client
            app.state.delivery = delivery

            # Redis is optional; without it sessions are local to this process
            redis_client = await create_redis_client(settings.redis.redis_uri)
            if redis_client is not None:
                store = RedisSessionStore(
                    redis_client,
                    lock_timeout_seconds=settings.redis.redis_lock_timeout_seconds,
                )
            else:
                if settings.redis.redis_uri:
                    log.warning("session_store_fallback", store="memory")
                store = InMemorySessionStore()
            app.state.redis = redis_client

            if settings.is_production and settings.otp.otp_expose_code:
                log.warning("otp_code_exposure_enabled", env=settings.env)

            app.state.otp_service = OtpService.from_settings(
                settings.otp, store, delivery
            )
            log.info(
                "otp_service_ready",
                mode=settings.otp.otp_mode,
                ttl_seconds=settings.otp.otp_ttl_seconds,
                max_attempts=settings.otp.otp_max_attempts,
                store=type(store).__name__,
            )

            yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        finally:
            await http_client.aclose()
            if redis_client is not None:
                await redis_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(otp_router)

    return app
