"""Regex and string-format helpers shared by properties and the rule engine."""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime
from functools import lru_cache

__all__ = [
    "compile_pattern",
    "pattern_matches",
    "is_email",
    "is_url",
    "is_uuid",
    "parse_date",
]

# /body/flags, #body#flags, ~body~flags...
_DELIMITED = re.compile(r"([/#~%@!+])(.*)\1([imsxuADU]*)", re.DOTALL)

_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}

_EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_URL = re.compile(
    r"https?:\/\/(www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_\+.~#?&//=]*)"
)

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d-%m-%Y", "%m/%d/%Y", "%Y-%m-%d %H:%M:%S")


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a bare or delimited regular expression.

    Delimited patterns (``/^[A-Z]+$/i``) have their delimiters stripped and
    trailing modifiers translated to ``re`` flags. Unknown modifiers are
    ignored.

    Args:
        pattern: Regular expression source.

    Returns:
        Compiled pattern.

    Raises:
        ValueError: If the expression does not compile.
    """
    body, flags = pattern, 0
    match = _DELIMITED.fullmatch(pattern)
    if match is not None:
        _, body, modifiers = match.groups()
        for modifier in modifiers:
            flags |= _FLAGS.get(modifier, 0)
    try:
        return re.compile(body, flags)
    except re.error as e:
        raise ValueError(f"Invalid pattern {pattern!r}: {e}") from e


def pattern_matches(pattern: str, value: str) -> bool:
    """Return True if the pattern is found anywhere in the value."""
    return compile_pattern(pattern).search(value) is not None


def is_email(value: str) -> bool:
    return _EMAIL.fullmatch(value) is not None


def is_url(value: str) -> bool:
    return _URL.fullmatch(value) is not None


def is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def parse_date(value: str) -> date | None:
    """Parse a date string, returning None if it is not a date.

    ISO 8601 (including a trailing ``Z``) is tried first, then a handful of
    common day/month layouts.
    """
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None
