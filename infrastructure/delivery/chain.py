"""Ordered delivery backends with sticky fallback.

dispatch() starts at the backend that succeeded last and walks the list
(wrapping around) until one accepts the code. Every attempt is bounded by
``timeout_seconds``; an exception or timeout counts as that backend failing.
Caller cancellation is not a backend failure and propagates unchanged.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from errors import ConfigurationError
from infrastructure.delivery.protocol import DeliveryBackend
from shared.logging import get_logger
from shared.phone import mask_phone

log = get_logger(__name__)


class DeliveryChain:
    def __init__(
        self, backends: Sequence[DeliveryBackend], timeout_seconds: float = 5.0
    ) -> None:
        if not backends:
            raise ConfigurationError("At least one delivery backend must be configured")
        self._backends = list(backends)
        self.timeout_seconds = timeout_seconds
        self._last_success = 0

    @property
    def backends(self) -> list[DeliveryBackend]:
        return list(self._backends)

    @property
    def order(self) -> list[str]:
        """Backend names in the order the next dispatch will try them."""
        count = len(self._backends)
        return [
            self._backends[(self._last_success + offset) % count].name
            for offset in range(count)
        ]

    async def _attempt(self, backend: DeliveryBackend, destination: str, code: str) -> bool:
        try:
            return bool(
                await asyncio.wait_for(
                    backend.send(destination, code), timeout=self.timeout_seconds
                )
            )
        except asyncio.TimeoutError:
            log.warning(
                "delivery_backend_timeout",
                backend=backend.name,
                phone=mask_phone(destination),
                timeout_seconds=self.timeout_seconds,
            )
        except Exception as e:
            log.warning(
                "delivery_backend_error",
                backend=backend.name,
                phone=mask_phone(destination),
                error=str(e),
                error_type=type(e).__name__,
            )
        return False

    async def dispatch(self, destination: str, code: str) -> bool:
        count = len(self._backends)
        start = self._last_success
        for offset in range(count):
            index = (start + offset) % count
            backend = self._backends[index]
            if await self._attempt(backend, destination, code):
                self._last_success = index
                log.info(
                    "otp_dispatched",
                    backend=backend.name,
                    phone=mask_phone(destination),
                    fallback_depth=offset,
                )
                return True
            log.warning(
                "delivery_backend_failed",
                backend=backend.name,
                phone=mask_phone(destination),
            )

        log.error(
            "delivery_all_backends_failed",
            phone=mask_phone(destination),
            backends=[b.name for b in self._backends],
        )
        return False
