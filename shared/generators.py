"""
Random code generators: pure, side-effect-free functions.

All generators draw from the ``secrets`` module; a platform without a secure
random source fails at import time rather than per call.
"""

from __future__ import annotations

import secrets


def generate_otp_code(length: int = 6) -> str:
    """Generate a cryptographically secure numeric OTP.

    Draws a uniformly distributed integer in ``[0, 10**length)`` and zero-pads
    it, so every code of the requested length is equally likely.

    Args:
        length: Number of digits (default 6).

    Returns:
        String of exactly *length* decimal digits; leading zeros are kept.

    Raises:
        ValueError: If *length* is less than 1.
    """
    if length < 1:
        raise ValueError("OTP length must be at least 1")
    return f"{secrets.randbelow(10**length):0{length}d}"
