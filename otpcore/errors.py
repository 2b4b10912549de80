"""
Exception types raised by otpcore.

A failed verification is not an error: ``check`` and ``sync`` report it in
their return value. Exceptions are reserved for malformed requests.
"""


class OTPError(ValueError):
    """Base class for every otpcore error."""


class InvalidSecretError(OTPError):
    """The shared secret is empty, of the wrong type or not valid base32."""


class InvalidConfigurationError(OTPError):
    """A digit length, window, period, counter or time is out of range."""


class UnsupportedAlgorithmError(InvalidConfigurationError):
    """The hash algorithm selector is not one of SHA1, SHA256, SHA512."""


class InvalidTokenError(OTPError):
    """The candidate code is not a string."""
