"""
Phone number helpers: normalization and log masking.

Normalization is shallow: every character other than ASCII 0-9 is dropped,
so "+91 98765 43210" and "9198765432 10" share the key "919876543210".
"""

from __future__ import annotations

import re

# ASCII 0-9 only; \D would keep Arabic-Indic and Devanagari digits
_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(phone: str) -> str:
    """Return *phone* with every non-digit character removed."""
    if not phone:
        return ""
    return _NON_DIGITS.sub("", phone)


def is_valid_phone(phone_key: str, min_digits: int = 10) -> bool:
    """Return True if the normalized *phone_key* has at least *min_digits* digits."""
    return len(phone_key) >= min_digits


def mask_phone(phone: str, visible_digits: int = 4) -> str:
    """Mask all but the last *visible_digits* digits of *phone* for logging."""
    digits = normalize_phone(phone)
    if len(digits) <= visible_digits:
        return digits
    return "*" * (len(digits) - visible_digits) + digits[-visible_digits:]
