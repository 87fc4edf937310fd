"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. The objects themselves are built once in the app
lifespan and stored on app.state.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from infrastructure.delivery.chain import DeliveryChain
from services.otp_service import OtpService


def get_otp_service(request: Request) -> OtpService:
    """Return the OtpService built by the lifespan."""
    return request.app.state.otp_service


def get_delivery_chain(request: Request) -> Optional[DeliveryChain]:
    return getattr(request.app.state, "delivery", None)


async def get_redis(request: Request):
    """Return the async Redis client from app.state (None when not configured)."""
    return getattr(request.app.state, "redis", None)
