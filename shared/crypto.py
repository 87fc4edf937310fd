"""
Comparison helpers for secret values.
"""

from __future__ import annotations

import secrets


def codes_match(expected: str, submitted: str) -> bool:
    """Compare two OTP codes in constant time.

    The comparison runs over UTF-8 bytes so non-ASCII input from a caller is
    rejected instead of raising ``TypeError``.
    """
    return secrets.compare_digest(
        expected.encode("utf-8"), submitted.encode("utf-8")
    )
