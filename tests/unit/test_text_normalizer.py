"""Unit tests for speech text normalization rules."""

from __future__ import annotations

import pytest

from pdfvoice.text.cleaners import (
    CollapseWhitespace,
    RemoveControlCharacters,
    SpeakLatexCommands,
    StripLatexDelimiters,
    TextCleaner,
)
from pdfvoice.text.normalizer import EMPTY_TEXT_PLACEHOLDER, TextNormalizer, page_marker


@pytest.mark.parametrize("raw", ["", "   ", "\n\t \n"])
def test_normalize_returns_placeholder_for_blank_input(raw: str) -> None:
    """Blank input should never reach an engine as empty text."""

    assert TextNormalizer().normalize(raw) == EMPTY_TEXT_PLACEHOLDER


def test_normalize_returns_placeholder_when_only_removed_characters_remain() -> None:
    """Input made of stripped characters should also fall back to the placeholder."""

    assert TextNormalizer().normalize("\x00\x07\u200b\ufeff") == EMPTY_TEXT_PLACEHOLDER


def test_normalize_removes_control_and_zero_width_characters() -> None:
    """Control and zero-width characters should vanish without joining words oddly."""

    text = "Hel\x00lo\u200b wor\x7fld"

    assert TextNormalizer().normalize(text) == "Hello world"


def test_normalize_replaces_unicode_spaces_and_collapses_runs() -> None:
    """Non-breaking and ideographic spaces should become single plain spaces."""

    text = "alpha\u00a0\u00a0beta\u3000gamma   delta"

    assert TextNormalizer().normalize(text) == "alpha beta gamma delta"


def test_normalize_keeps_single_newlines() -> None:
    """Only runs of two or more whitespace characters are collapsed."""

    assert TextNormalizer().normalize("line one\nline two\n\nline three") == (
        "line one\nline two line three"
    )


def test_normalize_speaks_unicode_math_symbols() -> None:
    """Math symbols and Greek letters should be replaced by spoken words."""

    assert TextNormalizer().normalize("x ≤ y") == "x less than or equal to y"
    assert TextNormalizer().normalize("2π∞") == "2 pi infinity"


def test_normalize_speaks_latex_math() -> None:
    """Inline LaTeX should lose its delimiters and read its macros aloud."""

    normalizer = TextNormalizer()

    assert normalizer.normalize(r"$\alpha + \beta$") == "alpha + beta"
    assert normalizer.normalize(r"\(\sqrt{x}\)") == "square root of x"
    assert normalizer.normalize(r"$x^{2}$") == "x to the power of 2"
    assert normalizer.normalize(r"$a_{i}$") == "a sub i"


def test_latex_in_does_not_consume_longer_commands() -> None:
    """`\\in` must only match as a whole command name."""

    normalizer = TextNormalizer()

    assert normalizer.normalize(r"$\infty$") == "infinity"
    assert normalizer.normalize(r"$\int f$") == "integral f"
    assert normalizer.normalize(r"$x \in A$") == "x in A"
    assert normalizer.normalize(r"$x \notin A$") == "x not in A"


@pytest.mark.parametrize(
    "raw",
    [
        "Plain sentence with  double spaces.",
        r"$\frac{a}{b} \leq \sqrt{c}$ and ∑ α",
        "\u200bzero\u00a0width\x01 text\n\n\nend",
        "",
        "--- Page 1 ---\nHello world\n\n--- Page 2 ---\nHello world\n",
    ],
)
def test_normalize_is_idempotent(raw: str) -> None:
    """Normalizing already-normalized text should change nothing."""

    normalizer = TextNormalizer()
    once = normalizer.normalize(raw)

    assert normalizer.normalize(once) == once


def test_strip_page_markers_removes_markers_and_collapses_space() -> None:
    """Markers should disappear from spoken text without leaving double spaces."""

    text = f"{page_marker(1)}\nHello world {page_marker(12)}\nHello world"

    assert TextNormalizer().strip_page_markers(text) == "Hello world Hello world"


def test_text_cleaner_accepts_custom_rule_sequence() -> None:
    """Callers should be able to run a subset of rules in their own order."""

    cleaner = TextCleaner(rules=[RemoveControlCharacters(), CollapseWhitespace()])

    assert cleaner.clean("a\x00b   $c$") == "ab $c$"


def test_individual_latex_rules_pad_replacements() -> None:
    """Rules should pad spoken phrases so adjacent tokens never fuse."""

    assert StripLatexDelimiters().apply("$x$") == " x "
    assert SpeakLatexCommands().apply(r"2\times3") == "2 times 3"
