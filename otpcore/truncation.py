"""
Dynamic truncation (RFC 4226 §5.3).

Turns an HMAC digest into a zero-padded decimal code.
"""

from otpcore.utils import validate_digits

MIN_DIGEST_SIZE = 20    # SHA-1, the shortest supported digest


def truncate(digest: bytes, digits: int) -> str:
    """
    Extract a *digits*-long decimal code from *digest*.

    The low nibble of the last byte selects a 4-byte window; its top bit is
    cleared to give a 31-bit value, which is reduced modulo ``10**digits``.

    Args:
        digest: Full HMAC digest (at least 20 bytes).
        digits: Code length.

    Returns:
        Zero-padded OTP string of exactly ``digits`` characters.

    Raises:
        InvalidConfigurationError: If ``digits`` is out of range.
        ValueError: If ``digest`` is shorter than an HMAC-SHA1 digest.
    """
    validate_digits(digits)
    if len(digest) < MIN_DIGEST_SIZE:
        raise ValueError(
            f"Digest must be at least {MIN_DIGEST_SIZE} bytes, got {len(digest)}."
        )

    offset = digest[-1] & 0x0F
    code = (
        (digest[offset] & 0x7F) << 24
        | (digest[offset + 1] & 0xFF) << 16
        | (digest[offset + 2] & 0xFF) << 8
        | (digest[offset + 3] & 0xFF)
    )
    otp = code % (10**digits)
    return str(otp).zfill(digits)
