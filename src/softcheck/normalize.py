"""Canonical string form of comparison operands.

Operands are compared as strings. Values whose first ten characters form a
date are cut down to that date, so timestamps taken at different times of the
same day compare equal.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from softcheck.errors import NormalizationError

logger = logging.getLogger(__name__)

DATE_PREFIX_LENGTH = 10

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%m-%d-%Y",
    "%m/%d/%Y",
)


def is_date_value(value: str, formats: tuple[str, ...] = DATE_FORMATS) -> bool:
    """Return True if ``value`` parses completely with one of ``formats``."""
    if len(value) != DATE_PREFIX_LENGTH:
        return False
    for fmt in formats:
        try:
            datetime.strptime(value, fmt)
        except ValueError:
            continue
        return True
    return False


def normalize(raw: Any) -> str:
    """Convert an operand to the string used for comparisons.

    Parameters
    ----------
    raw : Any
        Operand as passed by the caller. ``None`` becomes an empty string,
        booleans become ``"true"``/``"false"``, anything else is converted
        with ``str()``.

    Returns
    -------
    str
        The date prefix if the value starts with a recognized date,
        otherwise the value itself.

    Raises
    ------
    NormalizationError
        If date probing fails for a reason other than "not a date".
    """
    if raw is None:
        return ""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    value = raw if isinstance(raw, str) else str(raw)
    if len(value) < DATE_PREFIX_LENGTH:
        return value

    prefix = value[:DATE_PREFIX_LENGTH]
    try:
        if is_date_value(prefix):
            logger.debug("Normalized %r to date prefix %r", value, prefix)
            return prefix
    except (TypeError, OverflowError) as exc:
        raise NormalizationError(value, exc) from exc
    return value
