"""
otpcore – command-line entry point.

Usage
-----
    python main.py hotp --secret GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ --counter 0
    python main.py totp-check 94287082 --secret ... --time 59

Or, if installed as a package:
    otpcore <command> ...

Exit status: 0 generated / verified, 1 not verified, 2 malformed request.
"""

import argparse
import logging
import sys
from typing import List, Optional

from otpcore.algorithm import Algorithm
from otpcore.crypto import generate_base32_secret, generate_secret
from otpcore.errors import OTPError
from otpcore.hotp import (
    DEFAULT_HOTP_DIGITS,
    DEFAULT_WINDOW,
    SYNC_MAX_PROBE,
    check_hotp,
    generate_hotp,
    sync_hotp,
)
from otpcore.totp import (
    DEFAULT_PERIOD,
    DEFAULT_TOTP_DIGITS,
    DEFAULT_WINDOW_SIZE,
    check_totp,
    generate_totp,
    remaining_seconds,
)
from otpcore.utils import format_otp

# ── Logging setup ─────────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("otpcore")

# Keep key material out of debug output
logging.getLogger("otpcore.crypto").setLevel(logging.WARNING)

EXIT_OK = 0
EXIT_NOT_VERIFIED = 1
EXIT_MALFORMED = 2


# ── Argument helpers ──────────────────────────────────────────────────────────

def _secret(args: argparse.Namespace):
    """Base32 text by default; ``--raw`` passes the ASCII bytes through."""
    if args.raw:
        return args.secret.encode("utf-8")
    return args.secret


def _add_common(parser: argparse.ArgumentParser, digits: int) -> None:
    parser.add_argument("--secret", required=True, help="Shared secret (base32 unless --raw).")
    parser.add_argument("--raw", action="store_true", help="Use the secret text as raw key bytes.")
    parser.add_argument("--digits", type=int, default=digits)
    parser.add_argument(
        "--algorithm",
        default=Algorithm.SHA1.value,
        choices=[a.value for a in Algorithm],
        type=str.upper,
    )


def _add_time(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--time", type=float, default=None, help="Unix seconds (default: now).")
    parser.add_argument("--period", type=int, default=DEFAULT_PERIOD)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="otpcore", description="HOTP / TOTP one-time passwords.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("secret", help="Print a fresh random secret.")
    p.add_argument("--base32", action="store_true", help="Base32 text instead of alphanumeric.")
    p.add_argument("--length", type=int, default=20)

    p = sub.add_parser("hotp", help="Generate an HOTP code.")
    _add_common(p, DEFAULT_HOTP_DIGITS)
    p.add_argument("--counter", type=int, default=0)
    p.add_argument("--group", action="store_true", help="Print the code in groups of three.")

    p = sub.add_parser("hotp-check", help="Verify an HOTP code.")
    p.add_argument("token")
    _add_common(p, DEFAULT_HOTP_DIGITS)
    p.add_argument("--counter", type=int, default=0)
    p.add_argument("--window", type=int, default=DEFAULT_WINDOW)

    p = sub.add_parser("hotp-sync", help="Resynchronise with two consecutive HOTP codes.")
    p.add_argument("token1")
    p.add_argument("token2")
    _add_common(p, DEFAULT_HOTP_DIGITS)
    p.add_argument("--counter", type=int, default=0)
    p.add_argument("--max-probe", type=int, default=SYNC_MAX_PROBE)

    p = sub.add_parser("totp", help="Generate a TOTP code.")
    _add_common(p, DEFAULT_TOTP_DIGITS)
    _add_time(p)
    p.add_argument("--group", action="store_true", help="Print the code in groups of three.")

    p = sub.add_parser("totp-check", help="Verify a TOTP code.")
    p.add_argument("token")
    _add_common(p, DEFAULT_TOTP_DIGITS)
    _add_time(p)
    p.add_argument("--window-size", type=int, default=DEFAULT_WINDOW_SIZE)

    return parser


# ── Commands ──────────────────────────────────────────────────────────────────

def _run(args: argparse.Namespace) -> int:
    if args.command == "secret":
        if args.base32:
            print(generate_base32_secret(args.length))
        else:
            print(generate_secret(args.length))
        return EXIT_OK

    if args.command == "hotp":
        code = generate_hotp(_secret(args), args.counter, args.digits, args.algorithm)
        print(format_otp(code) if args.group else code)
        return EXIT_OK

    if args.command == "hotp-check":
        result = check_hotp(
            args.token, _secret(args), args.counter, args.digits, args.algorithm, args.window
        )
        if not result.matched:
            print("invalid")
            return EXIT_NOT_VERIFIED
        print(f"valid counter={result.counter}")
        return EXIT_OK

    if args.command == "hotp-sync":
        result = sync_hotp(
            args.token1,
            args.token2,
            _secret(args),
            counter=args.counter,
            digits=args.digits,
            algorithm=args.algorithm,
            max_probe=args.max_probe,
        )
        if not result.matched:
            print("not synchronised")
            return EXIT_NOT_VERIFIED
        print(f"synchronised counter={result.counter}")
        return EXIT_OK

    if args.command == "totp":
        code = generate_totp(_secret(args), args.time, args.digits, args.period, args.algorithm)
        print(format_otp(code) if args.group else code)
        logger.info("Code valid for %ds.", remaining_seconds(args.period, args.time))
        return EXIT_OK

    # totp-check
    valid = check_totp(
        args.token,
        _secret(args),
        reference_time=args.time,
        digits=args.digits,
        period=args.period,
        window_size=args.window_size,
        algorithm=args.algorithm,
    )
    print("valid" if valid else "invalid")
    return EXIT_OK if valid else EXIT_NOT_VERIFIED


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return _run(args)
    except OTPError as exc:
        logger.error("Malformed request: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_MALFORMED


if __name__ == "__main__":
    sys.exit(main())
