"""Twilio Programmable Messaging implementation of DeliveryBackend.

Sends one SMS via the Messages resource (form-encoded, HTTP basic auth with
the account SID and auth token).
"""

from config import DeliverySettings
from infrastructure.delivery.message import MessageTemplate, to_e164
from infrastructure.http_client import HttpClient
from shared.logging import get_logger
from shared.phone import mask_phone

log = get_logger(__name__)

_TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"
_ACCEPTED_STATUSES = ("queued", "accepted", "sending", "sent")


class TwilioBackend:
    name = "twilio"

    def __init__(
        self,
        settings: DeliverySettings,
        http_client: HttpClient,
        template: MessageTemplate,
    ) -> None:
        self._account_sid = settings.twilio_account_sid
        self._auth_token = settings.twilio_auth_token
        self._from_number = settings.twilio_from_number
        self._http = http_client
        self._template = template

    @property
    def configured(self) -> bool:
        return bool(self._account_sid and self._auth_token and self._from_number)

    async def send(self, destination: str, code: str) -> bool:
        if not self.configured:
            log.error("twilio_send_failed", reason="credentials_not_configured")
            return False

        response = await self._http.post(
            _TWILIO_MESSAGES_URL.format(sid=self._account_sid),
            data={
                "From": self._from_number,
                "To": to_e164(destination),
                "Body": self._template.render(code),
            },
            auth=(self._account_sid, self._auth_token),
        )
        if response.status_code not in (200, 201):
            log.error(
                "twilio_api_error",
                phone=mask_phone(destination),
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            return False

        status = response.json().get("status")
        if status not in _ACCEPTED_STATUSES:
            log.warning(
                "twilio_message_rejected", phone=mask_phone(destination), status=status
            )
            return False
        log.info("twilio_message_sent", phone=mask_phone(destination), status=status)
        return True
