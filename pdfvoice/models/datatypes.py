"""Core datatypes shared across pdfvoice modules.

Responsibilities:
- Represent immutable records exchanged between extraction and playback.
- Keep page-range clamping rules in one place.

Key types:
- `PageRange`, `Chunk`, `ExtractionResult`, `PlaybackState`, and
  `PlaybackSnapshot`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class PageRange:
    """Inclusive 1-based page window inside a document.

    Attributes:
        start_page: First selected page.
        end_page: Last selected page, never before `start_page`.
        total_pages: Page count of the document; `0` for an empty document.
    """

    start_page: int
    end_page: int
    total_pages: int

    @classmethod
    def clamped(cls, start: int, end: int, total_pages: int) -> PageRange:
        """Build a range with both bounds forced into `[1, total_pages]` and `end >= start`."""

        total = max(0, total_pages)
        upper = max(1, total)
        start_page = max(1, min(start, upper))
        end_page = max(start_page, min(end, upper))
        return cls(start_page=start_page, end_page=end_page, total_pages=total)

    @classmethod
    def whole_document(cls, total_pages: int) -> PageRange:
        """Return the range covering every page of a document."""

        return cls.clamped(1, total_pages, total_pages)

    @property
    def is_valid(self) -> bool:
        """Return whether the range satisfies `1 <= start <= end <= total`."""

        return 1 <= self.start_page <= self.end_page <= self.total_pages

    @property
    def page_count(self) -> int:
        """Number of pages covered by the range."""

        if not self.is_valid:
            return 0
        return self.end_page - self.start_page + 1

    def pages(self) -> range:
        """Iterate selected page numbers in document order."""

        if not self.is_valid:
            return range(0)
        return range(self.start_page, self.end_page + 1)


@dataclass(frozen=True, slots=True)
class Chunk:
    """A word-bounded slice of normalized text dispatched as one speech unit.

    Attributes:
        index: 0-based position in the chunk sequence.
        text: Space-joined chunk words.
        word_count: Number of whitespace-separated words in `text`.
    """

    index: int
    text: str
    word_count: int


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Outcome of extracting and preparing one page range for speech.

    Attributes:
        success: Whether extraction produced speakable text.
        error_message: Human-readable failure reason, empty on success.
        full_text: Normalized text including `--- Page N ---` markers.
        speech_text: Normalized text that was chunked and will be spoken.
        chunks: Ordered chunks covering `speech_text`.
        page_range: Range the result was built from.
        is_chunked: Whether `speech_text` exceeded the chunk-size threshold.
    """

    success: bool
    error_message: str = ""
    full_text: str = ""
    speech_text: str = ""
    chunks: tuple[Chunk, ...] = field(default_factory=tuple)
    page_range: PageRange = field(default_factory=lambda: PageRange(1, 1, 0))
    is_chunked: bool = False

    @classmethod
    def failure(cls, message: str, page_range: PageRange) -> ExtractionResult:
        """Build a failed result carrying only the reason and requested range."""

        return cls(success=False, error_message=message, page_range=page_range)

    @property
    def total_words(self) -> int:
        """Total word count across all chunks."""

        return sum(chunk.word_count for chunk in self.chunks)


class PlaybackState(str, Enum):
    """Lifecycle state of the playback sequencer."""

    STOPPED = "stopped"
    SPEAKING = "speaking"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class PlaybackSnapshot:
    """Read-only view of playback state and aggregate progress.

    `progress` and `current_word_index` are approximations when the speech
    engine does not report word boundaries.
    """

    state: PlaybackState = PlaybackState.STOPPED
    current_chunk_index: int = 0
    total_chunks: int = 0
    progress: float = 0.0
    current_word_index: int = 0
    total_words: int = 0
    paused_seconds: float = 0.0

    @property
    def is_speaking(self) -> bool:
        return self.state is PlaybackState.SPEAKING

    @property
    def is_paused(self) -> bool:
        return self.state is PlaybackState.PAUSED
