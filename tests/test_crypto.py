"""Tests for otpcore.crypto and otpcore.algorithm."""

import base64

import pytest

from otpcore.algorithm import Algorithm, digest_size, parse_algorithm
from otpcore.crypto import (
    ALPHANUMERIC,
    SECRET_LENGTH,
    constant_time_compare,
    generate_base32_secret,
    generate_secret,
    hmac_digest,
)
from otpcore.errors import InvalidConfigurationError, UnsupportedAlgorithmError


# ── HMAC ──────────────────────────────────────────────────────────────────────

def test_hmac_sha1_known_digest() -> None:
    digest = hmac_digest(b"12345678901234567890", b"test-input", Algorithm.SHA1)
    assert digest == bytes(
        [206, 196, 29, 189, 198, 222, 88, 115, 62, 215,
         116, 67, 206, 130, 89, 12, 146, 242, 197, 164]
    )


@pytest.mark.parametrize("alg", list(Algorithm))
def test_hmac_digest_length(alg: Algorithm) -> None:
    digest = hmac_digest(b"key", b"\x00" * 8, alg)
    assert len(digest) == digest_size(alg)


def test_digest_sizes() -> None:
    assert [digest_size(a) for a in Algorithm] == [20, 32, 64]


def test_hmac_deterministic() -> None:
    a = hmac_digest(b"key", b"message", Algorithm.SHA256)
    b = hmac_digest(b"key", b"message", Algorithm.SHA256)
    assert a == b


def test_hmac_key_sensitive() -> None:
    assert hmac_digest(b"key1", b"m", Algorithm.SHA1) != hmac_digest(b"key2", b"m", Algorithm.SHA1)


# ── Algorithm selector ────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "value,expected",
    [
        (Algorithm.SHA1, Algorithm.SHA1),
        ("SHA1", Algorithm.SHA1),
        ("sha256", Algorithm.SHA256),
        ("SHA-512", Algorithm.SHA512),
        (" sha512 ", Algorithm.SHA512),
    ],
)
def test_parse_algorithm(value, expected: Algorithm) -> None:
    assert parse_algorithm(value) is expected


@pytest.mark.parametrize("value", ["md5", "", "SHA384", 1, None])
def test_parse_algorithm_rejects_unknown(value) -> None:
    with pytest.raises(UnsupportedAlgorithmError):
        parse_algorithm(value)


def test_unsupported_algorithm_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_algorithm("whirlpool")


# ── Constant-time compare ─────────────────────────────────────────────────────

def test_constant_time_compare() -> None:
    assert constant_time_compare("755224", "755224")
    assert not constant_time_compare("755224", "755225")
    assert not constant_time_compare("755224", "7552240")


# ── Secret generation ─────────────────────────────────────────────────────────

def test_generate_secret_length_and_alphabet() -> None:
    s = generate_secret()
    assert len(s) == SECRET_LENGTH
    assert set(s) <= set(ALPHANUMERIC)


def test_generate_secret_custom_length() -> None:
    assert len(generate_secret(32)) == 32


def test_generate_secret_unique() -> None:
    assert generate_secret() != generate_secret()


@pytest.mark.parametrize("length", [0, -1, True])
def test_generate_secret_rejects_bad_length(length) -> None:
    with pytest.raises(InvalidConfigurationError):
        generate_secret(length)


def test_generate_base32_secret() -> None:
    s = generate_base32_secret()
    assert "=" not in s
    assert len(s) == 32
    padded = s + "=" * ((8 - len(s) % 8) % 8)
    assert len(base64.b32decode(padded)) == 20
