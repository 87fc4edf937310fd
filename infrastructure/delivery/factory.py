"""Builds the DeliveryChain from DeliverySettings.

``delivery_backend_order`` lists backend identifiers; each identifier maps to
a builder below. Unknown identifiers fail at startup. A known backend whose
credentials are missing is skipped with a warning, and an order that leaves
nothing usable is a startup error as well.
"""

from __future__ import annotations

from typing import Callable, Optional

from config import DeliverySettings
from errors import ConfigurationError
from infrastructure.delivery.chain import DeliveryChain
from infrastructure.delivery.console import ConsoleBackend
from infrastructure.delivery.http_gateway import HttpGatewayBackend
from infrastructure.delivery.message import MessageTemplate
from infrastructure.delivery.msg91 import Msg91Backend
from infrastructure.delivery.protocol import DeliveryBackend
from infrastructure.delivery.twilio import TwilioBackend
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

BackendBuilder = Callable[
    [DeliverySettings, HttpClient, MessageTemplate], DeliveryBackend
]

BACKEND_BUILDERS: dict[str, BackendBuilder] = {
    "console": lambda settings, http, template: ConsoleBackend(),
    "twilio": lambda settings, http, template: TwilioBackend(settings, http, template),
    "msg91": lambda settings, http, template: Msg91Backend(settings, http),
    "http": lambda settings, http, template: HttpGatewayBackend(
        settings, http, template
    ),
}


def build_backends(
    settings: DeliverySettings,
    http_client: HttpClient,
    ttl_seconds: int,
) -> list[DeliveryBackend]:
    template = MessageTemplate(
        template=settings.sms_template,
        app_name=settings.sms_app_name,
        ttl_seconds=ttl_seconds,
    )
    backends: list[DeliveryBackend] = []
    seen: set[str] = set()

    for name in settings.delivery_backend_order:
        builder: Optional[BackendBuilder] = BACKEND_BUILDERS.get(name)
        if builder is None:
            raise ConfigurationError(
                f"Unknown delivery backend '{name}'",
                field="delivery_backend_order",
                details={"known": sorted(BACKEND_BUILDERS)},
            )
        if name in seen:
            log.warning("delivery_backend_duplicate", backend=name)
            continue
        seen.add(name)

        backend = builder(settings, http_client, template)
        if not getattr(backend, "configured", True):
            log.warning("delivery_backend_skipped", backend=name, reason="not_configured")
            continue
        backends.append(backend)

    if settings.delivery_console_fallback and "console" not in seen:
        backends.append(ConsoleBackend())

    return backends


def build_delivery_chain(
    settings: DeliverySettings,
    http_client: HttpClient,
    ttl_seconds: int,
) -> DeliveryChain:
    backends = build_backends(settings, http_client, ttl_seconds)
    chain = DeliveryChain(backends, timeout_seconds=settings.delivery_timeout_seconds)
    log.info("delivery_chain_ready", order=chain.order)
    return chain
