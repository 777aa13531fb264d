"""Small string helpers used across the shell."""

from __future__ import annotations

_LLONG_MAX = 2**63 - 1
_LLONG_MIN_MAGNITUDE = 2**63
_LEADING_SPACE = " \t\n\v\f\r"


def atoll(text: str) -> int:
    """Parse a leading decimal integer the way ``atoll`` does.

    Leading whitespace is skipped and one optional sign is accepted.
    Parsing stops at the first non-digit. A value that does not fit in
    a signed 64-bit integer yields 0.
    """
    rest = text.lstrip(_LEADING_SPACE)
    sign = 1
    if rest[:1] in ("-", "+"):
        if rest[0] == "-":
            sign = -1
        rest = rest[1:]
    result = 0
    for char in rest:
        if not "0" <= char <= "9":
            break
        result = result * 10 + (ord(char) - ord("0"))
        if sign == 1 and result > _LLONG_MAX:
            return 0
        if sign == -1 and result > _LLONG_MIN_MAGNITUDE:
            return 0
    return sign * result


def strnjoin(first: str | None, second: str | None, limit: int) -> str | None:
    """Join ``first`` with at most ``limit`` characters of ``second``.

    Returns None when either string is missing.
    """
    if first is None or second is None:
        return None
    limit = max(limit, 0)
    return first + second[:limit]