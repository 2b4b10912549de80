"""
Utility helpers for otpcore: secret transcoding, input validation, time.
"""

import base64
import binascii
import math
import re
import time
from datetime import datetime, timezone
from typing import Union

from otpcore.errors import (
    InvalidConfigurationError,
    InvalidSecretError,
    InvalidTokenError,
)

MIN_DIGITS = 6
MAX_DIGITS = 10             # 31-bit truncated value < 10**10
MAX_COUNTER = 2**64 - 1     # counter is packed into 8 bytes
MAX_PERIOD = 300

Secret = Union[bytes, bytearray, str]
ReferenceTime = Union[None, int, float, datetime]


# ── Base32 ────────────────────────────────────────────────────────────────────

def normalize_secret(secret: str) -> str:
    """
    Normalise a base32 secret: strip spaces, uppercase, add padding.

    Args:
        secret: Raw user-supplied secret string.

    Returns:
        Uppercase base32 string with correct padding.

    Raises:
        InvalidSecretError: If the string contains invalid base32 characters.
    """
    secret = secret.strip().upper().replace(" ", "").replace("-", "")
    # Base32 alphabet: A-Z and 2-7
    if not re.fullmatch(r"[A-Z2-7]+=*", secret):
        raise InvalidSecretError("Secret contains invalid base32 characters.")
    # Pad to multiple of 8
    pad = (8 - len(secret) % 8) % 8
    return secret + "=" * pad


def decode_secret(secret: str) -> bytes:
    """
    Decode a base32-encoded secret string to raw bytes.

    Args:
        secret: Base32 secret (spaces and dashes are stripped).

    Returns:
        Raw bytes.

    Raises:
        InvalidSecretError: On invalid base32 input. A decode failure is
            never turned into an empty key.
    """
    try:
        raw = base64.b32decode(normalize_secret(secret), casefold=True)
    except binascii.Error as exc:
        raise InvalidSecretError(f"Invalid base32 secret: {exc}") from exc
    if not raw:
        raise InvalidSecretError("Base32 secret decodes to an empty key.")
    return raw


def encode_secret(raw: bytes) -> str:
    """Encode raw bytes as a base32 string (no padding)."""
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def coerce_secret(secret: Secret) -> bytes:
    """
    Turn a user-supplied secret into the HMAC key.

    ``bytes`` are used as-is; ``str`` is treated as base32 text.

    Raises:
        InvalidSecretError: Empty, malformed or of an unsupported type.
    """
    if isinstance(secret, (bytes, bytearray)):
        if not secret:
            raise InvalidSecretError("Secret must not be empty.")
        return bytes(secret)
    if isinstance(secret, str):
        return decode_secret(secret)
    raise InvalidSecretError(
        f"Secret must be bytes or base32 text, got {type(secret).__name__}."
    )


# ── Validation ────────────────────────────────────────────────────────────────

def _require_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(
            f"{name} must be an integer, got {type(value).__name__}."
        )
    return value


def validate_digits(digits: int) -> None:
    _require_int(digits, "Digits")
    if digits < MIN_DIGITS or digits > MAX_DIGITS:
        raise InvalidConfigurationError(
            f"Digits must be between {MIN_DIGITS} and {MAX_DIGITS}, got {digits}."
        )


def validate_window(window: int) -> None:
    _require_int(window, "Window")
    if window < 1:
        raise InvalidConfigurationError("Window must probe at least one counter.")


def validate_window_size(window_size: int) -> None:
    _require_int(window_size, "Window size")
    if window_size < 0:
        raise InvalidConfigurationError("Window size must not be negative.")


def validate_max_probe(max_probe: int) -> None:
    _require_int(max_probe, "Max probe")
    if max_probe < 1:
        raise InvalidConfigurationError("Max probe must be at least 1.")


def validate_period(period: int) -> None:
    _require_int(period, "Period")
    if period < 1 or period > MAX_PERIOD:
        raise InvalidConfigurationError(
            f"Period must be between 1 and {MAX_PERIOD} seconds."
        )


def validate_counter(counter: int) -> None:
    _require_int(counter, "Counter")
    if counter < 0 or counter > MAX_COUNTER:
        raise InvalidConfigurationError("Counter must fit in an unsigned 64-bit integer.")


def validate_token(token: str) -> None:
    if not isinstance(token, str):
        raise InvalidTokenError(
            f"Token must be a string of digits, got {type(token).__name__}."
        )


# ── Time helpers ──────────────────────────────────────────────────────────────

def unix_seconds(reference_time: ReferenceTime = None) -> float:
    """
    Convert *reference_time* to Unix seconds.

    ``None`` means now. Naive datetimes are taken as UTC.

    Raises:
        InvalidConfigurationError: For negative or unsupported values.
    """
    if reference_time is None:
        t: float = time.time()
    elif isinstance(reference_time, datetime):
        if reference_time.tzinfo is None:
            reference_time = reference_time.replace(tzinfo=timezone.utc)
        t = reference_time.timestamp()
    elif isinstance(reference_time, (int, float)) and not isinstance(reference_time, bool):
        t = float(reference_time)
    else:
        raise InvalidConfigurationError(
            f"Reference time must be a datetime or Unix seconds, "
            f"got {type(reference_time).__name__}."
        )
    if not math.isfinite(t):
        raise InvalidConfigurationError("Reference time must be finite.")
    if t < 0:
        raise InvalidConfigurationError("Reference time must not precede the Unix epoch.")
    return t


def format_otp(code: str, group: int = 3) -> str:
    """
    Format an OTP code with spaces for readability.

    Example::

        >>> format_otp("123456")
        '123 456'
    """
    return " ".join(code[i : i + group] for i in range(0, len(code), group))
