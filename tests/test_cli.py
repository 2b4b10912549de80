"""Tests for the command-line entry point (main.py)."""

import logging

import pytest

from main import EXIT_MALFORMED, EXIT_NOT_VERIFIED, EXIT_OK, main
from otpcore.crypto import ALPHANUMERIC

RFC_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def _run(capsys: pytest.CaptureFixture, argv: list) -> tuple:
    status = main(argv)
    out, err = capsys.readouterr()
    return status, out.strip(), err


def test_hotp(capsys: pytest.CaptureFixture) -> None:
    status, out, _ = _run(capsys, ["hotp", "--secret", RFC_SECRET_B32, "--counter", "1"])
    assert status == EXIT_OK
    assert out == "287082"


def test_hotp_grouped(capsys: pytest.CaptureFixture) -> None:
    _, out, _ = _run(capsys, ["hotp", "--secret", RFC_SECRET_B32, "--counter", "1", "--group"])
    assert out == "287 082"


def test_hotp_raw_secret(capsys: pytest.CaptureFixture) -> None:
    _, out, _ = _run(capsys, ["hotp", "--secret", "12345678901234567890", "--raw"])
    assert out == "755224"


def test_hotp_check(capsys: pytest.CaptureFixture) -> None:
    status, out, _ = _run(capsys, ["hotp-check", "969429", "--secret", RFC_SECRET_B32, "--counter", "1"])
    assert status == EXIT_OK
    assert out == "valid counter=3"


def test_hotp_check_not_verified(capsys: pytest.CaptureFixture) -> None:
    status, out, _ = _run(
        capsys, ["hotp-check", "969429", "--secret", RFC_SECRET_B32, "--counter", "1", "--window", "2"]
    )
    assert status == EXIT_NOT_VERIFIED
    assert out == "invalid"


def test_hotp_sync(capsys: pytest.CaptureFixture) -> None:
    status, out, _ = _run(capsys, ["hotp-sync", "254676", "287922", "--secret", RFC_SECRET_B32])
    assert status == EXIT_OK
    assert out == "synchronised counter=6"


def test_hotp_sync_gap(capsys: pytest.CaptureFixture) -> None:
    status, _, _ = _run(capsys, ["hotp-sync", "254676", "162583", "--secret", RFC_SECRET_B32])
    assert status == EXIT_NOT_VERIFIED


def test_totp(capsys: pytest.CaptureFixture) -> None:
    status, out, _ = _run(capsys, ["totp", "--secret", RFC_SECRET_B32, "--time", "59"])
    assert status == EXIT_OK
    assert out == "94287082"


def test_totp_sha256(capsys: pytest.CaptureFixture) -> None:
    _, out, _ = _run(
        capsys,
        ["totp", "--secret", "12345678901234567890123456789012", "--raw",
         "--algorithm", "sha256", "--time", "59"],
    )
    assert out == "46119246"


def test_totp_check(capsys: pytest.CaptureFixture) -> None:
    status, out, _ = _run(
        capsys, ["totp-check", "07081804", "--secret", RFC_SECRET_B32, "--time", "1111111139"]
    )
    assert status == EXIT_OK
    assert out == "valid"


def test_totp_check_outside_window(capsys: pytest.CaptureFixture) -> None:
    status, out, _ = _run(
        capsys,
        ["totp-check", "07081804", "--secret", RFC_SECRET_B32,
         "--time", "1111111169", "--window-size", "1"],
    )
    assert status == EXIT_NOT_VERIFIED
    assert out == "invalid"


def test_malformed_secret(capsys: pytest.CaptureFixture) -> None:
    status, out, err = _run(capsys, ["hotp", "--secret", "not-base32!"])
    assert status == EXIT_MALFORMED
    assert out == ""
    assert "error:" in err


def test_malformed_digits(capsys: pytest.CaptureFixture) -> None:
    status, _, err = _run(capsys, ["hotp", "--secret", RFC_SECRET_B32, "--digits", "0"])
    assert status == EXIT_MALFORMED
    assert "Digits" in err


def test_secret(capsys: pytest.CaptureFixture) -> None:
    _, out, _ = _run(capsys, ["secret"])
    assert len(out) == 20
    assert set(out) <= set(ALPHANUMERIC)


def test_secret_base32(capsys: pytest.CaptureFixture) -> None:
    _, out, _ = _run(capsys, ["secret", "--base32"])
    assert len(out) == 32


def test_crypto_logger_quieted() -> None:
    assert logging.getLogger("otpcore.crypto").level == logging.WARNING


def test_totp_time_beyond_counter_range(capsys: pytest.CaptureFixture) -> None:
    status, out, _ = _run(capsys, ["totp", "--secret", RFC_SECRET_B32, "--time", "1e30"])
    assert status == EXIT_MALFORMED
    assert out == ""
