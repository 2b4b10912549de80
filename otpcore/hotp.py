"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.
"""

import logging
import struct
from dataclasses import dataclass, field, replace
from typing import NamedTuple, Optional, Union

from otpcore.algorithm import Algorithm, parse_algorithm
from otpcore.crypto import constant_time_compare, generate_secret, hmac_digest
from otpcore.truncation import truncate
from otpcore.utils import (
    MAX_COUNTER,
    Secret,
    coerce_secret,
    validate_counter,
    validate_digits,
    validate_max_probe,
    validate_token,
    validate_window,
)

logger = logging.getLogger(__name__)

DEFAULT_HOTP_DIGITS = 6
DEFAULT_WINDOW = 5
SYNC_MAX_PROBE = 100


class HOTPMatch(NamedTuple):
    """Outcome of a check or resync: ``counter`` is None when not matched."""

    matched: bool
    counter: Optional[int]


NO_MATCH = HOTPMatch(False, None)


# ── Core computation ─────────────────────────────────────────────────────────

def _hotp_value(key: bytes, counter: int, digits: int, algorithm: Algorithm) -> str:
    """HOTP over already-validated inputs (RFC 4226 §5)."""
    msg = struct.pack(">Q", counter)
    return truncate(hmac_digest(key, msg, algorithm), digits)


def _scan(
    token: str,
    key: bytes,
    counter: int,
    digits: int,
    algorithm: Algorithm,
    window: int,
) -> HOTPMatch:
    # Never probe past the last 64-bit counter.
    last = min(counter + window, MAX_COUNTER + 1)
    token = token.strip()
    for candidate in range(counter, last):
        expected = _hotp_value(key, candidate, digits, algorithm)
        if constant_time_compare(token, expected):
            return HOTPMatch(True, candidate)
    return NO_MATCH


# ── Public API ───────────────────────────────────────────────────────────────

def generate_hotp(
    secret: Secret,
    counter: int,
    digits: int = DEFAULT_HOTP_DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
) -> str:
    """
    Generate an HOTP code.

    Args:
        secret:    Raw secret bytes, or base32 text.
        counter:   Synchronisation counter value.
        digits:    Number of OTP digits.
        algorithm: HMAC algorithm.

    Returns:
        Zero-padded OTP string.
    """
    key = coerce_secret(secret)
    validate_counter(counter)
    validate_digits(digits)
    return _hotp_value(key, counter, digits, parse_algorithm(algorithm))


def check_hotp(
    token: str,
    secret: Secret,
    counter: int = 0,
    digits: int = DEFAULT_HOTP_DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    window: int = DEFAULT_WINDOW,
) -> HOTPMatch:
    """
    Validate an HOTP token against ``counter .. counter + window - 1``.

    Args:
        token:     Token to validate.
        secret:    Raw secret bytes, or base32 text.
        counter:   First counter to probe.
        digits:    Expected OTP length.
        algorithm: HMAC algorithm.
        window:    Number of counters to probe (at least 1).

    Returns:
        :class:`HOTPMatch` holding the first matching counter, or
        ``HOTPMatch(False, None)``.
    """
    validate_token(token)
    key = coerce_secret(secret)
    validate_counter(counter)
    validate_digits(digits)
    validate_window(window)
    result = _scan(token, key, counter, digits, parse_algorithm(algorithm), window)
    logger.debug("HOTP check from counter %d (window %d): %s", counter, window, result.matched)
    return result


def sync_hotp(
    token1: str,
    token2: str,
    secret: Secret,
    counter: int = 0,
    digits: int = DEFAULT_HOTP_DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    max_probe: int = SYNC_MAX_PROBE,
) -> HOTPMatch:
    """
    Resynchronise a drifted counter from two consecutive tokens.

    ``token1`` is searched for within ``max_probe`` counters of ``counter``;
    ``token2`` must then match the very next counter. One leaked token on its
    own never moves the counter.

    Returns:
        ``HOTPMatch(True, n)`` where ``n`` is the counter ``token2`` matched,
        or ``HOTPMatch(False, None)``.
    """
    validate_token(token1)
    validate_token(token2)
    key = coerce_secret(secret)
    validate_counter(counter)
    validate_digits(digits)
    validate_max_probe(max_probe)
    alg = parse_algorithm(algorithm)

    first = _scan(token1, key, counter, digits, alg, max_probe)
    if not first.matched:
        logger.debug("HOTP resync: first token not found from counter %d", counter)
        return NO_MATCH

    second = _scan(token2, key, first.counter + 1, digits, alg, 1)
    if not second.matched:
        logger.debug("HOTP resync: second token does not follow counter %d", first.counter)
        return NO_MATCH

    logger.debug("HOTP resync: counter %d -> %d", counter, second.counter)
    return second


# ── Configuration object ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class HOTP:
    """
    Validated HOTP settings.

    ``secret`` defaults to a fresh random alphanumeric secret used as raw
    bytes. The instance is immutable: ``check`` and ``sync`` return the new
    counter and leave persisting it to the caller.
    """

    secret: Optional[Secret] = None
    counter: int = 0
    digits: int = DEFAULT_HOTP_DIGITS
    algorithm: Union[Algorithm, str] = Algorithm.SHA1
    window: int = DEFAULT_WINDOW
    key: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.secret is None:
            object.__setattr__(self, "secret", generate_secret().encode("ascii"))
        object.__setattr__(self, "key", coerce_secret(self.secret))
        object.__setattr__(self, "algorithm", parse_algorithm(self.algorithm))
        validate_counter(self.counter)
        validate_digits(self.digits)
        validate_window(self.window)

    def _counter(self, counter: Optional[int]) -> int:
        if counter is None:
            return self.counter
        validate_counter(counter)
        return counter

    def generate(self, counter: Optional[int] = None) -> str:
        """Code for *counter* (defaults to the configured counter)."""
        return _hotp_value(self.key, self._counter(counter), self.digits, self.algorithm)

    def check(self, token: str, counter: Optional[int] = None) -> HOTPMatch:
        validate_token(token)
        start = self._counter(counter)
        return _scan(token, self.key, start, self.digits, self.algorithm, self.window)

    def sync(
        self,
        token1: str,
        token2: str,
        counter: Optional[int] = None,
        max_probe: int = SYNC_MAX_PROBE,
    ) -> HOTPMatch:
        return sync_hotp(
            token1,
            token2,
            self.key,
            counter=self._counter(counter),
            digits=self.digits,
            algorithm=self.algorithm,
            max_probe=max_probe,
        )

    def advance(self, counter: int) -> "HOTP":
        """Return a copy positioned at *counter*."""
        return replace(self, counter=counter)
