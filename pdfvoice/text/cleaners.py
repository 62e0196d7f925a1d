"""Deterministic text cleaning rules for speech synthesis.

Responsibilities:
- Provide composable rules that make PDF-derived text safe for TTS engines.
- Replace math notation with spoken-word phrases.
- Keep every rule pure so the full sequence stays idempotent.
"""

from __future__ import annotations

import re
from typing import Mapping, Protocol

from .spoken_math import (
    LATEX_BRACED_COMMANDS,
    LATEX_COMMANDS,
    LATEX_SCRIPT_MARKERS,
    UNICODE_SYMBOLS,
)


class CleanerRule(Protocol):
    """Protocol for text cleaning rules."""

    def apply(self, text: str) -> str:
        """Apply a single cleaning transformation."""


def _spoken(phrase: str) -> str:
    """Pad a spoken phrase so it never fuses with neighbouring tokens."""

    return f" {phrase} "


class RemoveControlCharacters:
    """Drop ASCII control characters, keeping newline and tab."""

    _PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

    def apply(self, text: str) -> str:
        return self._PATTERN.sub("", text)


class RemoveInvisibleFormatting:
    """Drop zero-width and bidirectional formatting characters."""

    _PATTERN = re.compile(r"[\u200B-\u200D\u2060\uFEFF\u202A-\u202E\u2066-\u2069]")

    def apply(self, text: str) -> str:
        return self._PATTERN.sub("", text)


class NormalizeUnicodeSpaces:
    """Replace typographic and ideographic space variants with a plain space."""

    _PATTERN = re.compile(r"[\u00A0\u2000-\u200F\u2028-\u202F\u205F-\u206F\u3000]")

    def apply(self, text: str) -> str:
        return self._PATTERN.sub(" ", text)


class StripLatexDelimiters:
    """Replace inline and display math delimiters with a space.

    The enclosed expression is kept and handed to the command and symbol
    rules that follow.
    """

    _PATTERN = re.compile(r"\\\(|\\\)|\\\[|\\\]|\$\$|\$")

    def apply(self, text: str) -> str:
        return self._PATTERN.sub(" ", text)


class SpeakLatexCommands:
    """Read LaTeX macros, sub/superscripts and closing braces aloud."""

    def __init__(
        self,
        commands: Mapping[str, str] | None = None,
        braced_commands: Mapping[str, str] | None = None,
    ) -> None:
        """Compile one alternation per table, longest command name first."""

        self._commands = dict(LATEX_COMMANDS if commands is None else commands)
        self._braced = dict(LATEX_BRACED_COMMANDS if braced_commands is None else braced_commands)
        self._braced_pattern = self._compile(self._braced, suffix=r"\{")
        # `\in` must not swallow the head of `\infty` or `\int`.
        self._command_pattern = self._compile(self._commands, suffix=r"(?![A-Za-z])")
        self._script_pattern = re.compile(
            "|".join(re.escape(marker) for marker in LATEX_SCRIPT_MARKERS)
        )

    @staticmethod
    def _compile(table: Mapping[str, str], suffix: str) -> re.Pattern[str] | None:
        if not table:
            return None
        names = sorted(table, key=len, reverse=True)
        alternation = "|".join(re.escape(name) for name in names)
        return re.compile(rf"\\({alternation}){suffix}")

    def apply(self, text: str) -> str:
        """Substitute braced commands, plain commands, scripts, then braces."""

        if self._braced_pattern is not None:
            text = self._braced_pattern.sub(
                lambda match: _spoken(self._braced[match.group(1)]), text
            )
        if self._command_pattern is not None:
            text = self._command_pattern.sub(
                lambda match: _spoken(self._commands[match.group(1)]), text
            )
        text = self._script_pattern.sub(
            lambda match: _spoken(LATEX_SCRIPT_MARKERS[match.group(0)]), text
        )
        return text.replace("}", " ")


class SpeakMathSymbols:
    """Read Unicode math symbols and Greek letters aloud."""

    def __init__(self, symbols: Mapping[str, str] | None = None) -> None:
        self._symbols = dict(UNICODE_SYMBOLS if symbols is None else symbols)
        self._pattern = re.compile(
            "[" + "".join(re.escape(symbol) for symbol in self._symbols) + "]"
        )

    def apply(self, text: str) -> str:
        return self._pattern.sub(lambda match: _spoken(self._symbols[match.group(0)]), text)


class CollapseWhitespace:
    """Collapse whitespace runs to one space and trim both ends."""

    _PATTERN = re.compile(r"\s{2,}")

    def apply(self, text: str) -> str:
        return self._PATTERN.sub(" ", text).strip()


class TextCleaner:
    """Apply a sequence of deterministic cleaner rules."""

    def __init__(self, rules: list[CleanerRule] | None = None) -> None:
        """Initialize with custom rules or the default speech-safety sequence."""

        self.rules: list[CleanerRule] = rules or [
            RemoveControlCharacters(),
            RemoveInvisibleFormatting(),
            NormalizeUnicodeSpaces(),
            StripLatexDelimiters(),
            SpeakLatexCommands(),
            SpeakMathSymbols(),
            CollapseWhitespace(),
        ]

    def clean(self, text: str) -> str:
        """Apply all configured rules in order."""

        current = text
        for rule in self.rules:
            current = rule.apply(current)
        return current
