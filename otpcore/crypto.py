"""
Cryptographic utilities for otpcore.

Keyed hash     : HMAC-SHA1 / SHA256 / SHA512 (``cryptography``)
Comparison     : constant time (``hmac.compare_digest``)
Secrets        : CSPRNG (``secrets``)
"""

import base64
import hmac
import secrets

from cryptography.hazmat.primitives import hmac as crypto_hmac

from otpcore.algorithm import Algorithm, hash_for
from otpcore.errors import InvalidConfigurationError

# ── Constants ────────────────────────────────────────────────────────────────

SECRET_LENGTH = 20          # characters, as used by most HOTP/TOTP servers
SECRET_BYTES = 20           # 160-bit key (RFC 4226 §4 recommendation)
ALPHANUMERIC = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


# ── Keyed hash ────────────────────────────────────────────────────────────────

def hmac_digest(key: bytes, message: bytes, algorithm: Algorithm) -> bytes:
    """
    Compute ``HMAC(algorithm, key, message)``.

    Args:
        key:       Raw secret bytes.
        message:   Data to authenticate (the 8-byte counter for OTPs).
        algorithm: Resolved :class:`~otpcore.algorithm.Algorithm`.

    Returns:
        Full digest (20, 32 or 64 bytes).
    """
    h = crypto_hmac.HMAC(key, hash_for(algorithm))
    h.update(message)
    return h.finalize()


def constant_time_compare(a: str, b: str) -> bool:
    """Return True if *a* == *b* in constant time (timing-safe)."""
    return hmac.compare_digest(a.encode(), b.encode())


# ── Secret generation ────────────────────────────────────────────────────────

def generate_secret(length: int = SECRET_LENGTH) -> str:
    """
    Return a random alphanumeric secret of *length* characters.

    Every character is drawn independently and uniformly from
    :data:`ALPHANUMERIC` with :func:`secrets.choice`.

    Raises:
        InvalidConfigurationError: If *length* is not positive.
    """
    if isinstance(length, bool) or not isinstance(length, int) or length < 1:
        raise InvalidConfigurationError("Secret length must be a positive integer.")
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))


def generate_base32_secret(num_bytes: int = SECRET_BYTES) -> str:
    """Return *num_bytes* random bytes encoded as unpadded base32."""
    if isinstance(num_bytes, bool) or not isinstance(num_bytes, int) or num_bytes < 1:
        raise InvalidConfigurationError("Secret size must be a positive integer.")
    raw = secrets.token_bytes(num_bytes)
    return base64.b32encode(raw).decode("ascii").rstrip("=")
