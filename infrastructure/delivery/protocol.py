"""DeliveryBackend protocol: the delivery chain depends on this, not on a carrier."""

from typing import Protocol


class DeliveryBackend(Protocol):
    name: str

    async def send(self, destination: str, code: str) -> bool:
        """Hand *code* to the carrier for *destination*; True when accepted."""
        ...
