"""SMS body rendering shared by the text-message backends."""

from __future__ import annotations

import math
from dataclasses import dataclass

_FALLBACK_TEMPLATE = "Your {app_name} verification code is {code}."


@dataclass(frozen=True)
class MessageTemplate:
    template: str
    app_name: str
    ttl_seconds: int

    def render(self, code: str) -> str:
        values = {
            "code": code,
            "app_name": self.app_name,
            "ttl_minutes": max(1, math.ceil(self.ttl_seconds / 60)),
            "ttl_seconds": self.ttl_seconds,
        }
        try:
            return self.template.format(**values)
        except (KeyError, IndexError, ValueError):
            return _FALLBACK_TEMPLATE.format(**values)


def to_e164(phone_key: str) -> str:
    """Digits-only key → "+<digits>" as expected by most gateways."""
    return f"+{phone_key}"
