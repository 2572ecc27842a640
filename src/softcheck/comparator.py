"""Numeric-aware comparison of normalized operands."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from enum import IntEnum

_HEX_RE = re.compile(r"^[+-]?0[xX][0-9a-fA-F]+$")
_INTEGER_RE = re.compile(r"^[+-]?\d+[lL]?$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?[fFdD]?$")
_VERSION_RE = re.compile(r"^\d+(\.\d+){2,}$")


class Comparison(IntEnum):
    """Outcome of comparing two operands."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def _is_plain_number(value: str) -> bool:
    return bool(_HEX_RE.match(value) or _INTEGER_RE.match(value) or _DECIMAL_RE.match(value))


def is_version(value: str) -> bool:
    """Return True for dotted multi-part version strings such as ``1.2.10``."""
    return bool(_VERSION_RE.match(value))


def is_numeric(value: str) -> bool:
    """Return True if ``value`` is a numeric literal or a multi-part version string.

    Accepted: integers, decimals (``5.``, ``.5``), scientific notation,
    hexadecimal ``0x`` literals, a trailing type qualifier (``L`` on integers,
    ``F``/``D`` on decimals) and versions like ``1.2.10``. Surrounding
    whitespace, ``nan`` and ``inf`` are rejected.
    """
    if not value:
        return False
    return _is_plain_number(value) or is_version(value)


def to_decimal(value: str) -> Decimal:
    """Convert a plain numeric literal to an exact ``Decimal``."""
    if _HEX_RE.match(value):
        return Decimal(int(value, 16))
    if value[-1] in "lLfFdD":
        value = value[:-1]
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"Not a numeric literal: {value!r}") from exc


def _version_parts(value: str) -> list[int]:
    if not is_version(value):
        value = format(to_decimal(value), "f")
    return [int(part) for part in value.split(".")]


def _is_negative(value: str) -> bool:
    return not is_version(value) and to_decimal(value) < 0


def _compare_decimals(left: Decimal, right: Decimal) -> Comparison:
    if left < right:
        return Comparison.LESS
    if left > right:
        return Comparison.GREATER
    return Comparison.EQUAL


def compare_versions(left: str, right: str) -> Comparison:
    """Compare dotted versions component-wise; missing components count as 0.

    Versions are never negative, so a negative plain number sorts below any
    version.
    """
    left_negative = _is_negative(left)
    right_negative = _is_negative(right)
    if left_negative and right_negative:
        return _compare_decimals(to_decimal(left), to_decimal(right))
    if left_negative:
        return Comparison.LESS
    if right_negative:
        return Comparison.GREATER

    left_parts = _version_parts(left)
    right_parts = _version_parts(right)
    width = max(len(left_parts), len(right_parts))
    left_parts += [0] * (width - len(left_parts))
    right_parts += [0] * (width - len(right_parts))
    if left_parts < right_parts:
        return Comparison.LESS
    if left_parts > right_parts:
        return Comparison.GREATER
    return Comparison.EQUAL


def compare_numeric(left: str, right: str) -> Comparison:
    """Compare two numeric operands.

    Plain numbers compare by exact value, so ``"5.0"`` equals ``"5"`` and
    ``"1.5"`` is greater than ``"1.25"``. If either side is a multi-part
    version, both are compared as versions.

    Raises
    ------
    ValueError
        If either operand is not numeric.
    """
    for value in (left, right):
        if not is_numeric(value):
            raise ValueError(f"Not a numeric literal: {value!r}")

    if is_version(left) or is_version(right):
        return compare_versions(left, right)

    return _compare_decimals(to_decimal(left), to_decimal(right))
