"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

A TOTP is an HOTP whose counter is the number of ``period``-second steps
since the Unix epoch.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Union

from otpcore.algorithm import Algorithm, parse_algorithm
from otpcore.crypto import constant_time_compare, generate_secret
from otpcore.hotp import _hotp_value
from otpcore.utils import (
    MAX_COUNTER,
    ReferenceTime,
    Secret,
    coerce_secret,
    unix_seconds,
    validate_counter,
    validate_digits,
    validate_period,
    validate_token,
    validate_window_size,
)

logger = logging.getLogger(__name__)

DEFAULT_TOTP_DIGITS = 8
DEFAULT_PERIOD = 30
DEFAULT_WINDOW_SIZE = 2


def time_step_counter(reference_time: ReferenceTime = None, period: int = DEFAULT_PERIOD) -> int:
    """Return ``floor(unix_seconds / period)`` for *reference_time* (now if None)."""
    validate_period(period)
    counter = int(unix_seconds(reference_time)) // period
    validate_counter(counter)
    return counter


def _check_steps(
    token: str,
    key: bytes,
    step: int,
    digits: int,
    algorithm: Algorithm,
    window_size: int,
) -> bool:
    token = token.strip()
    for offset in range(-window_size, window_size + 1):
        counter = step + offset
        if counter < 0 or counter > MAX_COUNTER:
            continue
        expected = _hotp_value(key, counter, digits, algorithm)
        if constant_time_compare(token, expected):
            logger.debug("TOTP matched at step offset %d", offset)
            return True
    logger.debug("TOTP check failed within ±%d steps", window_size)
    return False


def generate_totp(
    secret: Secret,
    reference_time: ReferenceTime = None,
    digits: int = DEFAULT_TOTP_DIGITS,
    period: int = DEFAULT_PERIOD,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
) -> str:
    """
    Generate a TOTP code.

    Args:
        secret:         Raw secret bytes, or base32 text.
        reference_time: Unix seconds or datetime (uses time.time() if None).
        digits:         Number of digits in the OTP (default 8).
        period:         Time step in seconds (default 30).
        algorithm:      HMAC algorithm (default SHA1).

    Returns:
        OTP string, zero-padded to ``digits`` characters.
    """
    key = coerce_secret(secret)
    validate_digits(digits)
    counter = time_step_counter(reference_time, period)
    return _hotp_value(key, counter, digits, parse_algorithm(algorithm))


def check_totp(
    token: str,
    secret: Secret,
    reference_time: ReferenceTime = None,
    digits: int = DEFAULT_TOTP_DIGITS,
    period: int = DEFAULT_PERIOD,
    window_size: int = DEFAULT_WINDOW_SIZE,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
) -> bool:
    """
    Validate a TOTP token within ±``window_size`` time steps.

    Args:
        token:          Token to validate.
        secret:         Raw secret bytes, or base32 text.
        reference_time: Override Unix timestamp or datetime.
        digits:         Expected number of digits.
        period:         Time step in seconds.
        window_size:    Allowed skew in steps on each side (default 2).
        algorithm:      HMAC algorithm.

    Returns:
        True if the token is valid within the window. Rejecting a token that
        was already accepted is up to the caller.
    """
    validate_token(token)
    key = coerce_secret(secret)
    validate_digits(digits)
    validate_window_size(window_size)
    step = time_step_counter(reference_time, period)
    return _check_steps(token, key, step, digits, parse_algorithm(algorithm), window_size)


def remaining_seconds(period: int = DEFAULT_PERIOD, reference_time: ReferenceTime = None) -> int:
    """Return seconds until the current TOTP window expires."""
    validate_period(period)
    return period - (int(unix_seconds(reference_time)) % period)


@dataclass(frozen=True)
class TOTP:
    """
    Validated TOTP settings.

    ``reference_time=None`` means the wall clock at each call; use
    :meth:`at` to pin another instant.
    """

    secret: Optional[Secret] = None
    reference_time: ReferenceTime = None
    digits: int = DEFAULT_TOTP_DIGITS
    period: int = DEFAULT_PERIOD
    window_size: int = DEFAULT_WINDOW_SIZE
    algorithm: Union[Algorithm, str] = Algorithm.SHA1
    key: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.secret is None:
            object.__setattr__(self, "secret", generate_secret().encode("ascii"))
        object.__setattr__(self, "key", coerce_secret(self.secret))
        object.__setattr__(self, "algorithm", parse_algorithm(self.algorithm))
        validate_digits(self.digits)
        validate_period(self.period)
        validate_window_size(self.window_size)
        if self.reference_time is not None:
            unix_seconds(self.reference_time)

    def counter(self) -> int:
        return time_step_counter(self.reference_time, self.period)

    def generate(self) -> str:
        return _hotp_value(self.key, self.counter(), self.digits, self.algorithm)

    def check(self, token: str) -> bool:
        validate_token(token)
        return _check_steps(
            token, self.key, self.counter(), self.digits, self.algorithm, self.window_size
        )

    def remaining_seconds(self) -> int:
        return remaining_seconds(self.period, self.reference_time)

    def at(self, reference_time: ReferenceTime) -> "TOTP":
        """Return a copy evaluated at *reference_time*."""
        return replace(self, reference_time=reference_time)
