"""Console delivery sink for demo and local development.

Nothing leaves the process: the code is written to the log so a developer
can read it. Never put this backend first in a production order.
"""

from shared.logging import get_logger
from shared.phone import mask_phone

log = get_logger(__name__)


class ConsoleBackend:
    name = "console"

    async def send(self, destination: str, code: str) -> bool:
        log.info("otp_console_delivery", phone=mask_phone(destination), demo_code=code)
        return True
