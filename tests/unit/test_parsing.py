"""Unit tests for shared configuration parsing helpers."""

import pytest

from pdfvoice.parsing import (
    clamp,
    normalize_optional_string,
    parse_number,
    parse_permissive_boolean,
)


def test_normalize_optional_string_handles_blank_values() -> None:
    """Normalization should return `None` for `None` and blank textual values."""

    assert normalize_optional_string(None) is None
    assert normalize_optional_string("") is None
    assert normalize_optional_string("   ") is None


def test_normalize_optional_string_strips_non_blank_values() -> None:
    assert normalize_optional_string("  value  ") == "value"
    assert normalize_optional_string(42) == "42"


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("TrUe", True),
        ("  ON ", True),
        ("YeS", True),
        ("FALSE", False),
        (" oFf ", False),
        ("nO", False),
        (True, True),
    ],
)
def test_parse_permissive_boolean_accepts_mixed_case_tokens(
    token: object, expected: bool
) -> None:
    """Permissive parsing should accept valid tokens case-insensitively."""

    assert parse_permissive_boolean(token) is expected


@pytest.mark.parametrize("value", ["", "   ", "maybe", "2", object()])
def test_parse_permissive_boolean_returns_none_for_invalid_tokens(value: object) -> None:
    assert parse_permissive_boolean(value) is None


def test_parse_number_parses_tokens_and_blank_values() -> None:
    assert parse_number(" 12 ", "chunk_size_words", integer=True) == 12
    assert parse_number(7, "chunk_size_words", integer=True) == 7
    assert parse_number("0.25", "stall_progress_threshold", integer=False) == 0.25
    assert parse_number(3, "stall_timeout_seconds", integer=False) == 3.0
    assert parse_number("  ", "chunk_size_words", integer=True) is None


@pytest.mark.parametrize("value", ["ten", True, "1.5"])
def test_parse_number_rejects_malformed_integers(value: object) -> None:
    """Booleans and non-integer tokens should raise with the field name."""

    with pytest.raises(ValueError, match="`chunk_size_words`"):
        parse_number(value, "chunk_size_words", integer=True)


def test_clamp_limits_to_inclusive_window() -> None:
    assert clamp(5, 1, 10) == 5
    assert clamp(-3, 1, 10) == 1
    assert clamp(99, 1, 10) == 10
