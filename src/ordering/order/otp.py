"""Delivery OTP issuing and checking."""

import hmac
import secrets

OTP_MIN = 1000
OTP_MAX = 9999


def generate_otp() -> str:
    """Return a 4-digit code drawn uniformly from [1000, 9999]."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def otp_matches(stored: str | None, submitted) -> bool:
    """Constant-time string comparison. Non-string submissions never match."""
    if not stored or not isinstance(submitted, str):
        return False
    return hmac.compare_digest(stored.encode(), submitted.encode())
