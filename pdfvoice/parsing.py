"""Shared parsing helpers for configuration value normalization."""

from __future__ import annotations


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


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


def parse_number(value: object, field_name: str, *, integer: bool) -> int | float | None:
    """Parse an int or float token, returning `None` for blank values.

    Raises:
        ValueError: If the token is present but not numeric.
    """

    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be a number.")
    if isinstance(value, int) and integer:
        return value
    if isinstance(value, (int, float)) and not integer:
        return float(value)

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    try:
        return int(normalized) if integer else float(normalized)
    except ValueError as exc:
        kind = "an integer" if integer else "a number"
        raise ValueError(f"`{field_name}` must be {kind}, got `{normalized}`.") from exc


def clamp(value: int | float, lower: int | float, upper: int | float) -> int | float:
    """Force `value` into the inclusive `[lower, upper]` window."""

    return max(lower, min(value, upper))
