"""
Health check endpoint.

GET /health reports session store and delivery chain state.
Rules:
- Redis configured but unreachable → "unhealthy" (503); sessions cannot be read.
- Redis not configured → "degraded" (200); sessions are process-local.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from dependencies import get_delivery_chain, get_redis
from infrastructure.delivery.chain import DeliveryChain
from schemas.dto.responses.common import HealthResponse
from shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    redis=Depends(get_redis),
    delivery: Optional[DeliveryChain] = Depends(get_delivery_chain),
) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    if redis is None:
        checks["session_store"] = "memory"
        overall = "degraded"
    else:
        try:
            await redis.ping()
            checks["session_store"] = "ok"
        except Exception as e:
            log.warning("health_redis_ping_failed", error=str(e))
            checks["session_store"] = "error"
            overall = "unhealthy"

    checks["delivery"] = ",".join(delivery.order) if delivery is not None else "none"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content=HealthResponse(status=overall, checks=checks).model_dump(),
    )
