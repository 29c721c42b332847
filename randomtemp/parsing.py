"""Shared parsing helpers for environment value normalization."""

from __future__ import annotations

import re


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})
_UNSIGNED_INTEGER_PATTERN = re.compile(r"\+?[0-9]+")


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_bounded_unsigned(value: str, upper_bound: int) -> int | None:
    """Parse a decimal integer in `0..upper_bound`, returning `None` when invalid.

    Signs other than a leading `+`, digit separators and surrounding text are
    rejected, so `"-1"`, `"1_0"` and `"3x"` are all invalid.
    """

    normalized = normalize_optional_string(value)
    if normalized is None or not _UNSIGNED_INTEGER_PATTERN.fullmatch(normalized):
        return None
    parsed = int(normalized)
    if parsed > upper_bound:
        return None
    return parsed
