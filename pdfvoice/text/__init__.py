"""Text preparation components.

This package provides deterministic cleanup, normalization, and chunking
building blocks used before text is handed to a speech engine.
"""

from .chunking import Chunker, count_words, split_words
from .cleaners import (
    CollapseWhitespace,
    NormalizeUnicodeSpaces,
    RemoveControlCharacters,
    RemoveInvisibleFormatting,
    SpeakLatexCommands,
    SpeakMathSymbols,
    StripLatexDelimiters,
    TextCleaner,
)
from .normalizer import EMPTY_TEXT_PLACEHOLDER, TextNormalizer, page_marker

__all__ = [
    "Chunker",
    "CollapseWhitespace",
    "EMPTY_TEXT_PLACEHOLDER",
    "NormalizeUnicodeSpaces",
    "RemoveControlCharacters",
    "RemoveInvisibleFormatting",
    "SpeakLatexCommands",
    "SpeakMathSymbols",
    "StripLatexDelimiters",
    "TextCleaner",
    "TextNormalizer",
    "count_words",
    "page_marker",
    "split_words",
]
