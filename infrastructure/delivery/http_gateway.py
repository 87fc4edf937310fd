"""Generic JSON-over-HTTP SMS gateway.

POSTs ``{"to", "message", "from"}`` with a bearer token; any 2xx is success.
Covers self-hosted relays and carriers with a plain REST endpoint.
"""

from typing import Optional

from config import DeliverySettings
from infrastructure.delivery.message import MessageTemplate, to_e164
from infrastructure.http_client import HttpClient
from shared.logging import get_logger
from shared.phone import mask_phone

log = get_logger(__name__)


class HttpGatewayBackend:
    name = "http"

    def __init__(
        self,
        settings: DeliverySettings,
        http_client: HttpClient,
        template: MessageTemplate,
    ) -> None:
        self._url = settings.sms_http_url
        self._token = settings.sms_http_token
        self._sender: Optional[str] = settings.sms_http_sender or None
        self._http = http_client
        self._template = template

    @property
    def configured(self) -> bool:
        return bool(self._url)

    async def send(self, destination: str, code: str) -> bool:
        if not self.configured:
            log.error("sms_gateway_send_failed", reason="url_not_configured")
            return False

        payload = {"to": to_e164(destination), "message": self._template.render(code)}
        if self._sender:
            payload["from"] = self._sender
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        response = await self._http.post(self._url, json=payload, headers=headers)
        if 200 <= response.status_code < 300:
            log.info("sms_gateway_message_sent", phone=mask_phone(destination))
            return True
        log.error(
            "sms_gateway_error",
            phone=mask_phone(destination),
            status_code=response.status_code,
            response_text=response.text[:200],
        )
        return False
