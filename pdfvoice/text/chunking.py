"""Word-bounded text chunking.

Responsibilities:
- Split normalized text into chunks no larger than a word-count threshold.
- Count words with the same rule everywhere (whitespace split, empties dropped).
"""

from __future__ import annotations

from ..models.datatypes import Chunk


def split_words(text: str) -> list[str]:
    """Split text on any whitespace, discarding empty tokens."""

    return text.split()


def count_words(text: str) -> int:
    """Return the number of whitespace-separated words in `text`."""

    return len(split_words(text))


class Chunker:
    """Create fixed-size word chunks in source order."""

    def to_chunks(self, text: str, max_words: int) -> list[Chunk]:
        """Split text into chunks of at most `max_words` words.

        Args:
            text: Normalized text to split.
            max_words: Word-count threshold per chunk; must be positive.

        Returns:
            Ordered chunks. Every chunk but the last holds exactly `max_words`
            words; text with no words yields an empty list.
        """

        if max_words <= 0:
            raise ValueError("`max_words` must be a positive integer.")

        words = split_words(text)
        chunks: list[Chunk] = []
        for start in range(0, len(words), max_words):
            buffer = words[start : start + max_words]
            chunks.append(
                Chunk(index=len(chunks), text=" ".join(buffer), word_count=len(buffer))
            )
        return chunks
