"""Text normalization for speech synthesis.

Responsibilities:
- Turn raw extracted page text into TTS-safe text.
- Guarantee a non-empty result so engines are never handed blank input.
- Remove page markers from text that is about to be spoken.
"""

from __future__ import annotations

import re

from .cleaners import TextCleaner

EMPTY_TEXT_PLACEHOLDER = "No content available for speech synthesis."

_PAGE_MARKER_RE = re.compile(r"-{3}\s*Page\s+\d+\s*-{3}")


def page_marker(page_number: int) -> str:
    """Return the marker written before each page's text."""

    return f"--- Page {page_number} ---"


class TextNormalizer:
    """Normalize extracted text into its speakable form."""

    def __init__(self, cleaner: TextCleaner | None = None) -> None:
        self.cleaner = cleaner or TextCleaner()

    def normalize(self, text: str) -> str:
        """Clean `text` for speech, falling back to a fixed placeholder when empty.

        The transform is idempotent and never raises.
        """

        if not text or text.isspace():
            return EMPTY_TEXT_PLACEHOLDER
        cleaned = self.cleaner.clean(text)
        if not cleaned or cleaned.isspace():
            return EMPTY_TEXT_PLACEHOLDER
        return cleaned

    def strip_page_markers(self, text: str) -> str:
        """Remove `--- Page N ---` markers and re-collapse the surrounding whitespace."""

        without_markers = _PAGE_MARKER_RE.sub(" ", text)
        return re.sub(r"\s{2,}", " ", without_markers).strip()
