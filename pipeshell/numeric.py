"""Numeric parsing helpers used by the shell's builtins."""

from __future__ import annotations

import re

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = re.compile(r"[0-9]*")
_CUTOFF = 922337203685477580


def _split_number(text: str) -> tuple[int, str]:
    """Return the sign and the run of leading digits after whitespace and sign."""
    body = text.lstrip(_WHITESPACE)
    sign = 1
    if body[:1] in ("+", "-"):
        if body[0] == "-":
            sign = -1
        body = body[1:]
    match = _DIGITS.match(body)
    return sign, match.group() if match else ""


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= (1 << 31) else value


def atoi(text: str) -> int:
    """Parse a leading integer the way the C library helper does.

    Leading whitespace and one sign are accepted; parsing stops at the first
    non-digit. A value past the 64-bit range gives -1 (positive) or 0
    (negative); otherwise the result is truncated to a 32-bit int.
    """
    sign, digits = _split_number(text)
    result = 0
    for ch in digits:
        if result > _CUTOFF or (result == _CUTOFF and int(ch) > 7):
            return -1 if sign == 1 else 0
        result = result * 10 + int(ch)
    return _to_int32(result * sign)


def is_numeric(text: str) -> bool:
    """True if ``text`` is an optional sign followed only by ASCII digits."""
    body = text[1:] if text[:1] in ("+", "-") else text
    return all(ch in "0123456789" for ch in body)


def parse_exit_status(text: str) -> int:
    """Parse an ``exit`` argument and reduce it modulo 256.

    The remainder keeps the sign of the value, as the C ``%`` operator does,
    so ``"-1"`` gives ``-1``. Raises ValueError if the value does not fit in
    a signed 64-bit integer.
    """
    sign, digits = _split_number(text)
    limit = 7 if sign == 1 else 8
    result = 0
    for ch in digits:
        if result > _CUTOFF or (result == _CUTOFF and int(ch) > limit):
            raise ValueError(f"numeric argument required: {text!r}")
        result = result * 10 + int(ch)
    value = result * sign
    remainder = abs(value) % 256
    return -remainder if value < 0 else remainder