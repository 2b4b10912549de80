"""
HMAC hash algorithms supported by HOTP / TOTP.
"""

from enum import Enum
from typing import Union

from cryptography.hazmat.primitives import hashes

from otpcore.errors import UnsupportedAlgorithmError


class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"


_HASH_MAP: dict[str, type] = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}


def parse_algorithm(value: Union[Algorithm, str]) -> Algorithm:
    """
    Resolve an algorithm selector.

    Accepts an :class:`Algorithm` member or a name such as ``"sha256"`` or
    ``"SHA-512"``.

    Raises:
        UnsupportedAlgorithmError: For anything else.
    """
    if isinstance(value, Algorithm):
        return value
    if not isinstance(value, str):
        raise UnsupportedAlgorithmError(
            f"Algorithm must be a string, got {type(value).__name__}."
        )
    name = value.strip().upper().replace("-", "")
    try:
        return Algorithm(name)
    except ValueError:
        raise UnsupportedAlgorithmError(
            f"Unsupported algorithm '{value}'. Supported: SHA1, SHA256, SHA512."
        ) from None


def hash_for(algorithm: Algorithm) -> hashes.HashAlgorithm:
    """Return a fresh ``cryptography`` hash instance for *algorithm*."""
    return _HASH_MAP[algorithm]()


def digest_size(algorithm: Algorithm) -> int:
    """Digest length in bytes: 20, 32 or 64."""
    return _HASH_MAP[algorithm].digest_size
