"""MSG91 flow API implementation of DeliveryBackend.

MSG91 renders the SMS from a DLT-registered template on its side, so the
code is passed as the ``otp`` template variable rather than as message text.
"""

from config import DeliverySettings
from infrastructure.http_client import HttpClient
from shared.logging import get_logger
from shared.phone import mask_phone

log = get_logger(__name__)

_MSG91_FLOW_URL = "https://control.msg91.com/api/v5/flow/"


class Msg91Backend:
    name = "msg91"

    def __init__(self, settings: DeliverySettings, http_client: HttpClient) -> None:
        self._auth_key = settings.msg91_auth_key
        self._template_id = settings.msg91_template_id
        self._sender_id = settings.msg91_sender_id
        self._http = http_client

    @property
    def configured(self) -> bool:
        return bool(self._auth_key and self._template_id)

    async def send(self, destination: str, code: str) -> bool:
        if not self.configured:
            log.error("msg91_send_failed", reason="credentials_not_configured")
            return False

        payload = {
            "template_id": self._template_id,
            "sender": self._sender_id,
            "short_url": "0",
            "recipients": [{"mobiles": destination, "otp": code}],
        }
        response = await self._http.post(
            _MSG91_FLOW_URL,
            json=payload,
            headers={"authkey": self._auth_key, "Content-Type": "application/json"},
        )
        if response.status_code != 200:
            log.error(
                "msg91_api_error",
                phone=mask_phone(destination),
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            return False

        data = response.json()
        if data.get("type") != "success":
            log.warning(
                "msg91_message_rejected",
                phone=mask_phone(destination),
                message=data.get("message"),
            )
            return False
        log.info("msg91_message_sent", phone=mask_phone(destination))
        return True
